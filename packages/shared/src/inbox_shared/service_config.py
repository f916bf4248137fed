"""External service configuration.

Each external collaborator (Chatwoot, the Evolution gateway, the n8n webhook)
is described by a ServiceConfig. auth_env_var names an environment variable,
not the credential itself: secrets never cross the Temporal data converter.
Workflow and activity inputs carry no token at all; the channel-access worker
reads the credentials from its own environment. The operator's session token
is only accepted by the in-process engine (ConnectionWorkflow,
SyncOrchestrator), which persists nothing.
"""

import os

from pydantic import BaseModel

# n8n answers with this message when asked to create or pair an instance whose
# name is already registered elsewhere.
DEFAULT_CONFLICT_MARKER = "Essa instancia ja existe!"

# How long the pairing webhook gets to answer; PAIRING_TIMEOUT_SECONDS overrides.
DEFAULT_PAIRING_TIMEOUT_SECONDS = 15.0


class ServiceConfig(BaseModel):
    """Describes how to reach one external HTTP service."""

    service_id: str
    service_type: str  # chatwoot, evolution, n8n
    base_url: str | None = None
    auth_env_var: str | None = None
    account_id: int | None = None  # chatwoot only
    timeout_seconds: float = 30.0
    pairing_webhook: str = "get-qrcode"  # n8n only
    provision_webhook: str = "criainbox"  # n8n only
    conflict_marker: str = DEFAULT_CONFLICT_MARKER


class ServiceConfigs(BaseModel):
    """The three collaborators the channel engine talks to."""

    chatwoot: ServiceConfig
    evolution: ServiceConfig
    n8n: ServiceConfig
    pairing_timeout_seconds: float = DEFAULT_PAIRING_TIMEOUT_SECONDS


def load_service_configs() -> ServiceConfigs:
    """Build service configs from the environment.

    CHATWOOT_ACCOUNT_ID is required; every Chatwoot call is account-scoped.
    URLs fall back to each connector's default when unset.
    """
    account_id = os.environ.get("CHATWOOT_ACCOUNT_ID", "")
    if not account_id.isdigit():
        raise ValueError(
            "CHATWOOT_ACCOUNT_ID must be set to the numeric Chatwoot account id"
        )

    return ServiceConfigs(
        chatwoot=ServiceConfig(
            service_id="chatwoot",
            service_type="chatwoot",
            base_url=os.environ.get("CHATWOOT_BASE_URL") or None,
            auth_env_var="CHATWOOT_API_TOKEN",
            account_id=int(account_id),
        ),
        evolution=ServiceConfig(
            service_id="evolution",
            service_type="evolution",
            base_url=os.environ.get("EVOLUTION_API_URL") or None,
            auth_env_var="EVOLUTION_API_KEY",
        ),
        n8n=ServiceConfig(
            service_id="n8n",
            service_type="n8n",
            base_url=os.environ.get("N8N_BASE_URL") or None,
            auth_env_var="N8N_WEBHOOK_TOKEN",
            pairing_webhook=os.environ.get("N8N_PAIRING_WEBHOOK", "get-qrcode"),
            provision_webhook=os.environ.get("N8N_PROVISION_WEBHOOK", "criainbox"),
        ),
        pairing_timeout_seconds=float(
            os.environ.get("PAIRING_TIMEOUT_SECONDS", DEFAULT_PAIRING_TIMEOUT_SECONDS)
        ),
    )
