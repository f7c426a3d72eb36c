"""Help-text tooltips shown next to form fields, editable by admins."""

import logging

from ramp_portal.core.exceptions import ValidationError
from ramp_portal.models import db
from ramp_portal.models.settings import TooltipConfig
from ramp_portal.services.permission_service import require_permission

logger = logging.getLogger(__name__)

MAX_KEY_LENGTH = 100


def get_tooltips() -> dict[str, str]:
    return {t.key: t.text for t in TooltipConfig.query.order_by(TooltipConfig.key).all()}


def replace_tooltips(actor, mapping) -> dict[str, str]:
    """Replace the whole tooltip map; keys absent from ``mapping`` are removed."""
    require_permission(actor, "config.manage")
    if not isinstance(mapping, dict):
        raise ValidationError("tooltips must be an object of key → text")
    for key, text in mapping.items():
        if not key or len(key) > MAX_KEY_LENGTH:
            raise ValidationError("Invalid tooltip key", details={"key": key})
        if not isinstance(text, str):
            raise ValidationError("Tooltip text must be a string", details={key: "not a string"})

    existing = {t.key: t for t in TooltipConfig.query.all()}
    for key, row in existing.items():
        if key not in mapping:
            db.session.delete(row)
    for key, text in mapping.items():
        row = existing.get(key)
        if row is None:
            db.session.add(TooltipConfig(key=key, text=text))
        else:
            row.text = text
    db.session.commit()

    logger.info("Tooltips replaced (%d keys)", len(mapping), extra={"actor_id": actor.id})
    return get_tooltips()
