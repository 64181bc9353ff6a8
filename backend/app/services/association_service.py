"""
Component <-> SKU association maintenance.

The association lives on component_details.sku_code as a comma separated list.
Both batch operations walk their items one by one and commit each row on its
own: a failing row becomes an error entry in the result and the loop carries on,
rows already written stay written.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.repository import component_repo
from app.utils import sku_codes
from app.utils.sku_codes import AssociationChange


logger = logging.getLogger(__name__)


def remove_from_all(db: Session, sku_code: str) -> List[AssociationChange]:
    """Strip `sku_code` from every active component that lists it."""
    components = component_repo.list_referencing(db, sku_code)
    if not components:
        logger.info("association: no components reference sku_code=%s", sku_code)
        return []

    logger.info("association: %d components reference sku_code=%s", len(components), sku_code)

    changes: List[AssociationChange] = []
    for component in components:
        component_id = component.id
        component_code = component.component_code
        old_value = component.sku_code
        try:
            new_value = sku_codes.remove(old_value, sku_code)
            updated = component_repo.set_sku_codes(db, component, new_value)
            changes.append(
                AssociationChange(
                    component_id=component_id,
                    component_code=component_code,
                    old_sku_code=old_value,
                    new_sku_code=updated.sku_code,
                )
            )
        except SQLAlchemyError as exc:
            logger.warning(
                "association: removing sku_code=%s from component %s failed: %s",
                sku_code, component_code, exc,
            )
            changes.append(
                AssociationChange(component_id=component_id, component_code=component_code, error=str(exc))
            )
    return changes


def add_to_specific(db: Session, sku_code: str, component_ids: Iterable[Optional[int]]) -> List[AssociationChange]:
    """
    Append `sku_code` to each listed component.
    Missing/inactive ids and components that already carry the code are skipped without an entry.
    """
    changes: List[AssociationChange] = []
    for component_id in component_ids:
        if not component_id:
            continue
        try:
            component = component_repo.get_active(db, component_id)
            if component is None:
                continue

            old_value = component.sku_code
            if sku_codes.contains(old_value, sku_code):
                continue

            updated = component_repo.set_sku_codes(db, component, sku_codes.append(old_value, sku_code))
            changes.append(
                AssociationChange(
                    component_id=component_id,
                    component_code=component.component_code,
                    old_sku_code=old_value,
                    new_sku_code=updated.sku_code,
                )
            )
        except SQLAlchemyError as exc:
            logger.warning(
                "association: adding sku_code=%s to component id=%s failed: %s",
                sku_code, component_id, exc,
            )
            changes.append(AssociationChange(component_id=component_id, error=str(exc)))

    logger.info("association: sku_code=%s added to %d components", sku_code, len(changes))
    return changes


def summarize(message: str, changes: List[AssociationChange]) -> Dict[str, Any]:
    return {
        "message": message,
        "updated_components": len(changes),
        "details": [c.as_dict() for c in changes],
    }
