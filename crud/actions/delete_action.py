"""
Delete action - remove a record and return to the index
"""

from crud.actions.base_action import BaseAction
from crud.event import Subject


class DeleteAction(BaseAction):
    """
    POST and DELETE only; a GET would let links and crawlers delete records.
    Always redirects to the index, flashing the outcome.
    """

    route = 'member'

    _defaults = {
        'messages': {
            'success': {'text': 'Successfully deleted {name}', 'category': 'success'},
            'error': {'text': 'Could not delete {name}', 'category': 'error'},
        },
        'api': {
            'methods': ['post', 'delete'],
            'success': {'code': 200},
            'error': {'code': 400},
        },
    }

    def _delete(self, id):
        subject = self.subject()
        entity = self._find_entity(id, subject)

        event = self.trigger('before_delete', subject)
        if event.is_stopped:
            subject.set(success=False)
        else:
            subject.set(success=self.repository.delete(entity))

        self.trigger('after_delete', subject)
        self._audit(subject)
        self.set_flash('success' if subject.success else 'error', subject)
        return self.redirect_to(subject, self.url('index'))

    def _post(self, id):
        return self._delete(id)

    def api_payload(self, subject: Subject):
        return {'data': {}}
