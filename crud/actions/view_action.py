"""
View action - display a single record
"""

from typing import Any, Dict

from crud.actions.base_action import BaseAction
from crud.event import Subject


class ViewAction(BaseAction):
    route = 'member'
    template_kind = 'view'

    def _get(self, id):
        subject = self.subject()
        self._find_entity(id, subject)
        subject.set(success=True)
        return self.render(subject)

    def view_vars(self, subject: Subject) -> Dict[str, Any]:
        view_vars = super().view_vars(subject)
        entity = subject.get('entity')
        view_vars.update(entity=entity, fields=self.repository.form_fields())
        view_vars[self.resource_name] = entity
        return view_vars

    def api_payload(self, subject: Subject) -> Dict[str, Any]:
        return {'data': subject.entity.to_dict()}
