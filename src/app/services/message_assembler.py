"""Montador de mensagens de e-mail (builder one-shot).

O chamador acumula remetente, destinatários, headers, assunto e conteúdo
em qualquer ordem e chama compose() uma única vez. compose() valida,
negocia content-type/charset, dobra headers e devolve um
ComposedMessage imutável (UNBUILT → COMPOSED via fsm).

Concorrência: não há lock interno. Um único dono lógico deve acumular
e compor; compartilhar a instância entre threads exige sincronização
externa e uso concorrente tem comportamento indefinido. compose() só
faz I/O no passo de POP-before-SMTP (chamada bloqueante); timeouts são
repassados ao colaborador externo.

Falhas em qualquer passo deixam o montador em UNBUILT, sem resultado
parcial armazenado.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from api.connectors.email.pop import POP3_DEFAULT_PORT, Pop3PreAuthenticator
from api.payload_builders.email import (
    HeaderStore,
    is_plain_text,
    negotiate_content_type,
    normalize_subject,
)
from api.validators.email import build_address, resolve_charset
from app.domain.email_message import BodyKind, ComposedMessage
from app.observability import get_correlation_id, record_compose_failure
from app.sessions.config import SessionConfig
from config.settings.email import EnvironmentDefaults
from fsm import AssemblerState, create_fsm
from utils.errors import (
    AlreadyComposedError,
    EmailError,
    InfrastructureError,
    InvalidAddressError,
    MissingFromError,
    NoRecipientsError,
    TransportFailureError,
)

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable, Mapping

    from app.domain.email_message import Address, CompositePart
    from app.protocols.content_provider import ContentProviderProtocol
    from app.protocols.pop_before_smtp import PopBeforeSmtpProtocol
    from app.sessions.models import MailSession

logger = logging.getLogger(__name__)

INVALID_ADDRESS_LIST_MSG = "Address List provided was invalid"
ALREADY_COMPOSED_MSG = "A mensagem já foi composta"


def _utc_now() -> datetime:
    return datetime.now(UTC)


class MessageAssembler:
    """Builder de mensagem com transição única para COMPOSED.

    Args:
        session_config: Configuração de sessão; criada a partir dos
            defaults quando omitida
        defaults: Defaults de ambiente (charset, from, host)
        pop_authenticator: Colaborador POP-before-SMTP
        clock: Fonte da data de envio quando o chamador não define uma
    """

    def __init__(
        self,
        session_config: SessionConfig | None = None,
        *,
        defaults: EnvironmentDefaults | None = None,
        pop_authenticator: PopBeforeSmtpProtocol | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        if defaults is None:
            defaults = session_config.defaults if session_config else EnvironmentDefaults()
        self._defaults = defaults
        self._session_config = session_config or SessionConfig(defaults)
        self._pop_authenticator = pop_authenticator
        self._clock = clock or _utc_now
        self._fsm = create_fsm(AssemblerState.UNBUILT, owner_id="message_assembler")
        self._composed: ComposedMessage | None = None

        self._charset: str | None = resolve_charset(defaults.charset)
        self._content: Any = None
        self._content_type: str | None = None
        self._composite: CompositePart | None = None
        self._provider: ContentProviderProtocol | None = None

        self._from: Address | None = None
        self._to: list[Address] = []
        self._cc: list[Address] = []
        self._bcc: list[Address] = []
        self._reply_to: list[Address] = []
        self._headers = HeaderStore()
        self._subject: str | None = None
        self._sent_date: datetime | None = None

        self._pop_before_smtp = False
        self._pop_host: str | None = None
        self._pop_username: str | None = None
        self._pop_password: str | None = None

    def _check_unbuilt(self) -> None:
        if not self._fsm.can_transition_to(AssemblerState.COMPOSED):
            raise AlreadyComposedError(ALREADY_COMPOSED_MSG)

    def _create_address(
        self,
        email: str,
        name: str | None,
        charset: str | None,
    ) -> Address:
        return build_address(email, name, charset or self._charset)

    def _build_all(self, emails: Iterable[str]) -> list[Address]:
        items = list(emails) if emails is not None else []
        if not items:
            raise InvalidAddressError(INVALID_ADDRESS_LIST_MSG)
        return [self._create_address(email, None, None) for email in items]

    @staticmethod
    def _require_addresses(addresses: Collection[Address] | None) -> list[Address]:
        if not addresses:
            raise InvalidAddressError(INVALID_ADDRESS_LIST_MSG)
        return list(addresses)

    # Conteúdo

    def set_charset(self, charset: str) -> MessageAssembler:
        """Define o charset da mensagem (e default dos nomes de exibição).

        Raises:
            UnsupportedCharsetError: Charset sem codec
        """
        self._check_unbuilt()
        self._charset = resolve_charset(charset)
        return self

    def set_content(self, content: Any, content_type: str) -> MessageAssembler:
        """Define o corpo bruto e negocia o content-type."""
        self._check_unbuilt()
        self._content = content
        self.update_content_type(content_type)
        return self

    def set_composite_content(self, part: CompositePart) -> MessageAssembler:
        self._check_unbuilt()
        self._composite = part
        return self

    def set_content_provider(self, provider: ContentProviderProtocol) -> MessageAssembler:
        """Injeta provider; o ContentSpec dele é lido no compose()."""
        self._check_unbuilt()
        self._provider = provider
        return self

    def update_content_type(self, content_type: str | None) -> MessageAssembler:
        self._check_unbuilt()
        self._content_type, self._charset = negotiate_content_type(
            content_type, self._charset
        )
        return self

    # Endereços

    def set_from(
        self,
        email: str,
        name: str | None = None,
        charset: str | None = None,
    ) -> MessageAssembler:
        self._check_unbuilt()
        self._from = self._create_address(email, name, charset)
        return self

    def add_to(
        self,
        email: str,
        name: str | None = None,
        charset: str | None = None,
    ) -> MessageAssembler:
        self._check_unbuilt()
        self._to.append(self._create_address(email, name, charset))
        return self

    def add_cc(
        self,
        email: str,
        name: str | None = None,
        charset: str | None = None,
    ) -> MessageAssembler:
        self._check_unbuilt()
        self._cc.append(self._create_address(email, name, charset))
        return self

    def add_bcc(
        self,
        email: str,
        name: str | None = None,
        charset: str | None = None,
    ) -> MessageAssembler:
        self._check_unbuilt()
        self._bcc.append(self._create_address(email, name, charset))
        return self

    def add_reply_to(
        self,
        email: str,
        name: str | None = None,
        charset: str | None = None,
    ) -> MessageAssembler:
        self._check_unbuilt()
        self._reply_to.append(self._create_address(email, name, charset))
        return self

    def add_to_all(self, emails: Iterable[str]) -> MessageAssembler:
        """Adiciona vários To; um endereço inválido não adiciona nenhum.

        Raises:
            InvalidAddressError: Lista vazia ou endereço inválido
        """
        self._check_unbuilt()
        self._to.extend(self._build_all(emails))
        return self

    def add_cc_all(self, emails: Iterable[str]) -> MessageAssembler:
        self._check_unbuilt()
        self._cc.extend(self._build_all(emails))
        return self

    def add_bcc_all(self, emails: Iterable[str]) -> MessageAssembler:
        self._check_unbuilt()
        self._bcc.extend(self._build_all(emails))
        return self

    def set_to(self, addresses: Collection[Address]) -> MessageAssembler:
        """Substitui a lista To.

        Raises:
            InvalidAddressError: Coleção vazia
        """
        self._check_unbuilt()
        self._to = self._require_addresses(addresses)
        return self

    def set_cc(self, addresses: Collection[Address]) -> MessageAssembler:
        self._check_unbuilt()
        self._cc = self._require_addresses(addresses)
        return self

    def set_bcc(self, addresses: Collection[Address]) -> MessageAssembler:
        self._check_unbuilt()
        self._bcc = self._require_addresses(addresses)
        return self

    def set_reply_to(self, addresses: Collection[Address]) -> MessageAssembler:
        self._check_unbuilt()
        self._reply_to = self._require_addresses(addresses)
        return self

    # Headers, assunto e data

    def add_header(self, name: str, value: str) -> MessageAssembler:
        """Define header customizado (última escrita vence).

        Raises:
            InvalidHeaderError: Nome ou valor vazio
        """
        self._check_unbuilt()
        self._headers.set(name, value)
        return self

    def set_headers(self, headers: Mapping[str, str]) -> MessageAssembler:
        self._check_unbuilt()
        self._headers.set_all(headers)
        return self

    def get_header(self, name: str) -> str | None:
        return self._headers.get(name)

    @property
    def headers(self) -> dict[str, str]:
        return self._headers.all()

    def set_subject(self, subject: str | None) -> MessageAssembler:
        self._check_unbuilt()
        self._subject = subject
        return self

    def set_sent_date(self, sent_date: datetime | None) -> MessageAssembler:
        self._check_unbuilt()
        self._sent_date = sent_date
        return self

    def set_pop_before_smtp(
        self,
        enabled: bool,
        host: str | None = None,
        username: str | None = None,
        password: str | None = None,
    ) -> MessageAssembler:
        """Ativa pré-autenticação POP antes do envio.

        Raises:
            ValueError: Ativado sem host POP
        """
        self._check_unbuilt()
        if enabled and not host:
            raise ValueError("POP-before-SMTP exige host POP")
        self._pop_before_smtp = enabled
        self._pop_host = host
        self._pop_username = username
        self._pop_password = password
        return self

    # Leitura

    @property
    def state(self) -> AssemblerState:
        return self._fsm.current_state

    @property
    def is_composed(self) -> bool:
        return self._fsm.current_state is AssemblerState.COMPOSED

    @property
    def composed(self) -> ComposedMessage | None:
        return self._composed

    @property
    def session_config(self) -> SessionConfig:
        return self._session_config

    def get_session(self) -> MailSession:
        """Atalho para SessionConfig.get_session() (congela a config)."""
        return self._session_config.get_session()

    @property
    def charset(self) -> str | None:
        return self._charset

    @property
    def content(self) -> Any:
        return self._content

    @property
    def content_type(self) -> str | None:
        return self._content_type

    @property
    def composite_content(self) -> CompositePart | None:
        return self._composite

    @property
    def content_provider(self) -> ContentProviderProtocol | None:
        return self._provider

    @property
    def from_address(self) -> Address | None:
        return self._from

    @property
    def to_addresses(self) -> tuple[Address, ...]:
        return tuple(self._to)

    @property
    def cc_addresses(self) -> tuple[Address, ...]:
        return tuple(self._cc)

    @property
    def bcc_addresses(self) -> tuple[Address, ...]:
        return tuple(self._bcc)

    @property
    def reply_to_addresses(self) -> tuple[Address, ...]:
        return tuple(self._reply_to)

    @property
    def subject(self) -> str | None:
        return self._subject

    @property
    def sent_date(self) -> datetime | None:
        return self._sent_date

    @property
    def pop_before_smtp(self) -> bool:
        return self._pop_before_smtp

    @property
    def pop_host(self) -> str | None:
        return self._pop_host

    # Composição

    def _run_pop_before_smtp(self) -> None:
        host = self._pop_host or ""
        authenticator = self._pop_authenticator or Pop3PreAuthenticator(
            timeout_ms=self._session_config.socket_connection_timeout_ms,
        )
        try:
            authenticator.authenticate(
                host,
                self._pop_username or "",
                self._pop_password or "",
            )
        except InfrastructureError:
            raise
        except Exception as exc:
            raise TransportFailureError(
                "Falha na pré-autenticação POP-before-SMTP",
                host=host,
                port=POP3_DEFAULT_PORT,
            ) from exc

    def _build(self) -> ComposedMessage:
        # assunto sem quebras de linha
        subject = normalize_subject(self._subject)

        # provider materializado e content-type renegociado
        content = self._content
        content_type = self._content_type
        charset = self._charset
        composite = self._composite
        if self._provider is not None:
            spec = self._provider.produce(charset)
            content, composite = spec.raw, spec.composite
            content_type = spec.content_type
            if spec.charset is not None:
                charset = spec.charset
        content_type, charset = negotiate_content_type(content_type, charset)

        # corpo
        if content is not None:
            if is_plain_text(content_type) and isinstance(content, str):
                body_kind, body = BodyKind.TEXT, content
            else:
                body_kind, body = BodyKind.RAW, content
        elif composite is not None:
            body_kind, body = BodyKind.COMPOSITE, composite
        else:
            body_kind, body = BodyKind.TEXT, ""

        # remetente
        from_address = self._from
        from_is_default = False
        if from_address is None:
            default_from = self._session_config.default_from()
            if not default_from:
                raise MissingFromError("Remetente (From) obrigatório")
            from_address = build_address(default_from)
            from_is_default = True

        # destinatários
        if not (self._to or self._cc or self._bcc):
            raise NoRecipientsError("Ao menos um destinatário (To, Cc ou Bcc) é obrigatório")

        # headers dobrados com o charset resolvido
        headers = self._headers.folded(charset)

        # data de envio
        sent_date = self._sent_date if self._sent_date is not None else self._clock()

        # POP-before-SMTP
        if self._pop_before_smtp:
            self._run_pop_before_smtp()

        return ComposedMessage(
            from_address=from_address,
            to=tuple(self._to),
            cc=tuple(self._cc),
            bcc=tuple(self._bcc),
            reply_to=tuple(self._reply_to),
            subject=subject,
            content_type=content_type,
            charset=charset,
            body_kind=body_kind,
            body=body,
            sent_date=sent_date,
            headers=headers,
            from_is_default=from_is_default,
        )

    def compose(self) -> ComposedMessage:
        """Compõe a mensagem final (uma única vez).

        Returns:
            ComposedMessage imutável

        Raises:
            AlreadyComposedError: compose() já foi chamado
            MissingFromError: Sem From e sem default resolvível
            NoRecipientsError: Nenhum To/Cc/Bcc
            TransportFailureError: Falha no POP-before-SMTP
        """
        self._check_unbuilt()
        try:
            composed = self._build()
        except (EmailError, InfrastructureError) as exc:
            record_compose_failure(type(exc).__name__, get_correlation_id() or None)
            raise

        result = self._fsm.transition(
            AssemblerState.COMPOSED,
            trigger="compose",
            metadata={"recipient_count": composed.recipient_count},
        )
        if not result.success:
            raise AlreadyComposedError(result.error_reason or ALREADY_COMPOSED_MSG)

        self._composed = composed
        self._subject = composed.subject
        self._content_type = composed.content_type
        self._charset = composed.charset
        self._sent_date = composed.sent_date

        logger.info(
            "message_composed",
            extra={
                "to_count": len(composed.to),
                "cc_count": len(composed.cc),
                "bcc_count": len(composed.bcc),
                "reply_to_count": len(composed.reply_to),
                "header_count": len(composed.headers),
                "body_kind": composed.body_kind.value,
                "from_is_default": composed.from_is_default,
                "fsm": self._fsm.get_state_summary(),
                "fsm_history": self._fsm.get_history_summary(),
            },
        )
        return composed


__all__ = [
    "ALREADY_COMPOSED_MSG",
    "INVALID_ADDRESS_LIST_MSG",
    "MessageAssembler",
]
