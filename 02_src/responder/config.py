"""Project-level configuration, path helpers and reply texts."""

import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_API_URL = "https://api.wassenger.com/v1"

MEMBER_ID_PATTERN = re.compile(r"^[a-f0-9]{24}$", re.IGNORECASE)

PathLike = Union[str, Path]


class ConfigError(Exception):
    """Invalid or incomplete configuration. Fatal at startup."""


WELCOME_MESSAGE = "Hey there 👋 Welcome to this chatbot demo!"

UNKNOWN_COMMAND_MESSAGE = (
    "Sorry, I don't understand that command. "
    "Please try again by replying with one of the available options."
)

DEFAULT_MESSAGE = """This is a sample bot to showcase for WhatsApp using the Wassenger API.

Chatbot tasks available:

1️⃣ Create a reminder
2️⃣ List reminders
3️⃣ Delete reminder
4️⃣ Chat with a person

Type *help* to see this message again.

You can also ask the bot to send you multiple sample messages based on the following types:

- Text
- Image
- Video
- Audio
- PDF Document
- Excel document
- File
- Location
- Contact card
- Quote message
- Button
- List
- Emojis 🥳
- Text formatting
- Link preview
- Reaction

Give it a try 😁
"""


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class MetadataEntry:
    """Contact metadata pair. `value` may be a callable evaluated at write time."""

    key: str
    value: str | Callable[[], str]

    def resolve(self) -> str:
        return self.value() if callable(self.value) else self.value


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the responder."""

    api_key: str = ""
    device: str | None = None
    api_url: str = DEFAULT_API_URL
    api_host: str = "localhost"
    api_port: int = 8080
    production: bool = False
    webhook_url: str | None = None
    state_db_path: str | None = None

    # Labels
    bot_chat_labels: tuple[str, ...] = ("bot",)
    assignment_labels: tuple[str, ...] = ("from-bot",)
    remove_labels_after_assignment: bool = True
    skip_chat_labels: tuple[str, ...] = ("no-bot",)

    # Eligibility
    numbers_blacklist: tuple[str, ...] = ()
    numbers_whitelist: tuple[str, ...] = ()
    skip_archived_chats: bool = True

    # Assignment
    enable_member_chat_assignment: bool = True
    assign_only_to_online_members: bool = False
    skip_team_roles: tuple[str, ...] = ("admin",)
    team_whitelist: tuple[str, ...] = ()
    team_blacklist: tuple[str, ...] = ()

    # Metadata
    bot_chat_metadata: tuple[MetadataEntry, ...] = field(
        default_factory=lambda: (MetadataEntry("bot_start", utc_timestamp),)
    )
    assignment_metadata: tuple[MetadataEntry, ...] = field(
        default_factory=lambda: (MetadataEntry("bot_stop", utc_timestamp),)
    )

    # Texts
    welcome_message: str = WELCOME_MESSAGE
    default_message: str = DEFAULT_MESSAGE
    unknown_command_message: str = UNKNOWN_COMMAND_MESSAGE
    footer: str = "Powered by Wassenger"

    def validate(self) -> None:
        """Check settings that make the service unusable when wrong."""
        if not self.api_key or len(self.api_key) < 60:
            raise ConfigError(
                "Please sign up in Wassenger and obtain your API key here: "
                "https://app.wassenger.com/apikeys"
            )
        if self.device and not MEMBER_ID_PATTERN.match(self.device):
            raise ConfigError(
                "Invalid WhatsApp device ID: must be 24 characters hexadecimal value"
            )
        if self.production and not self.webhook_url:
            raise ConfigError(
                "Missing required environment variable: WEBHOOK_URL must be present in production mode"
            )


def _env_list(name: str, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> Settings:
    """Build Settings from environment variables."""
    device = os.getenv("DEVICE", "").strip() or None
    return Settings(
        api_key=os.getenv("API_KEY", ""),
        device=device,
        api_url=os.getenv("API_URL", DEFAULT_API_URL),
        api_host=os.getenv("API_HOST", "localhost"),
        api_port=int(os.getenv("API_PORT", "8080")),
        production=os.getenv("APP_ENV", "").lower() == "production",
        webhook_url=os.getenv("WEBHOOK_URL") or None,
        state_db_path=os.getenv("STATE_DB_PATH") or None,
        bot_chat_labels=_env_list("BOT_CHAT_LABELS", ("bot",)),
        assignment_labels=_env_list("ASSIGNMENT_LABELS", ("from-bot",)),
        remove_labels_after_assignment=_env_bool("REMOVE_LABELS_AFTER_ASSIGNMENT", True),
        skip_chat_labels=_env_list("SKIP_CHAT_LABELS", ("no-bot",)),
        numbers_blacklist=_env_list("NUMBERS_BLACKLIST"),
        numbers_whitelist=_env_list("NUMBERS_WHITELIST"),
        skip_archived_chats=_env_bool("SKIP_ARCHIVED_CHATS", True),
        enable_member_chat_assignment=_env_bool("ENABLE_MEMBER_CHAT_ASSIGNMENT", True),
        assign_only_to_online_members=_env_bool("ASSIGN_ONLY_TO_ONLINE_MEMBERS", False),
        skip_team_roles=_env_list("SKIP_TEAM_ROLES", ("admin",)),
        team_whitelist=_env_list("TEAM_WHITELIST"),
        team_blacklist=_env_list("TEAM_BLACKLIST"),
    )


def validate_team_members(settings: Settings, member_ids: set[str]) -> None:
    """Ensure every whitelisted/blacklisted member id is well formed and exists."""
    for member_id in settings.team_whitelist + settings.team_blacklist:
        if not MEMBER_ID_PATTERN.match(member_id):
            raise ConfigError(
                f"Team user ID in TEAM_WHITELIST and TEAM_BLACKLIST must be a 24 characters hexadecimal value: {member_id}"
            )
        if member_id not in member_ids:
            raise ConfigError(
                f"Team user ID in TEAM_WHITELIST or TEAM_BLACKLIST does not exist: {member_id}"
            )


def resolve_db_path(env_value: PathLike | None = None) -> PathLike | None:
    """Resolve STATE_DB_PATH to an absolute path. None keeps state in memory."""
    if not env_value:
        return None

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate
