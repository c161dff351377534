"""
Edit action - update an existing record
"""

from crud.actions.add_action import AddAction
from crud.event import Subject


class EditAction(AddAction):
    """
    GET renders the form for an existing record. POST, PUT and PATCH apply
    the submitted values, validate and save.
    """

    route = 'member'
    template_kind = 'form'

    _defaults = {
        'save_method': 'save',
        'legend': 'Edit {title}',
        'messages': {
            'success': {'text': 'Successfully updated {name}', 'category': 'success'},
            'error': {'text': 'Could not update {name}', 'category': 'error'},
        },
        'api': {
            'methods': ['put', 'post', 'patch'],
            'success': {'code': 200},
            'error': {'exception': 'validate'},
        },
        'redirect': AddAction._defaults['redirect'],
    }

    def _get(self, id):
        subject = self.subject()
        self._find_entity(id, subject)
        subject.set(success=True)
        return self.render(subject)

    def _put(self, id):
        subject = self.subject(save_method=self.config['save_method'])
        entity = self._find_entity(id, subject)
        self.repository.patch_entity(entity, self.request_data())

        event = self.trigger('before_save', subject)
        if event.is_stopped:
            return self._error(subject)

        save = getattr(self.repository, subject.save_method)
        if save(subject.entity):
            return self._success(subject)
        return self._error(subject)

    def _post(self, id):
        return self._put(id)

    def _patch(self, id):
        return self._put(id)

    def _success(self, subject: Subject):
        subject.set(success=True, created=False)
        self.trigger('after_save', subject)
        self._audit(subject)
        self.set_flash('success', subject)
        return self.redirect_to(subject, self.url('index'))
