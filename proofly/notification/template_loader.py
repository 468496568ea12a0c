from pathlib import Path

from proofly.notification.exceptions import NotificationError

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def load_template(name: str, template_dir: Path | None = None) -> str:
    """Load an email body template.

    Args:
        name: File name inside the template directory, e.g. "confirmation.html".
        template_dir: Directory to read from. Defaults to the bundled templates.

    Raises:
        NotificationError: if the file cannot be read.
    """
    path = (template_dir or _DEFAULT_TEMPLATE_DIR) / name
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise NotificationError(f"Failed to load email template {name}: {exc}") from exc
