"""
Add action - create a record from a form post or an API payload
"""

from flask import request

from crud.actions.base_action import BaseAction
from crud.errors import count_errors
from crud.event import Subject
from logging_config import audit_logger


class AddAction(BaseAction):
    """
    GET renders an empty form (query string values pre-fill it).
    POST and PUT validate and save a new record, then redirect to the index
    or re-render the form with the validation errors.
    """

    route = 'new'
    template_kind = 'form'

    _defaults = {
        'save_method': 'save',
        'legend': 'New {title}',
        'messages': {
            'success': {'text': 'Successfully created {name}', 'category': 'success'},
            'error': {'text': 'Could not create {name}', 'category': 'error'},
        },
        'api': {
            'methods': ['put', 'post'],
            'success': {'code': 201, 'data': {'entity': ['id']}},
            'error': {'exception': 'validate'},
        },
        'redirect': {
            'post_add': {
                'reader': 'request.data',
                'key': '_add',
                'url': {'action': 'add'},
            },
            'post_edit': {
                'reader': 'request.data',
                'key': '_edit',
                'url': {'action': 'edit', 'id': ('entity', 'id')},
            },
        },
    }

    def _get(self):
        entity = self.repository.new_entity(request.args.to_dict(), validate=False)
        subject = self.subject(success=True, entity=entity)
        return self.render(subject)

    def _post(self):
        entity = self.repository.new_entity(self.request_data())
        subject = self.subject(entity=entity, save_method=self.config['save_method'])

        event = self.trigger('before_save', subject)
        if event.is_stopped:
            return self._error(subject)

        save = getattr(self.repository, subject.save_method)
        if save(subject.entity):
            return self._success(subject)
        return self._error(subject)

    def _put(self):
        return self._post()

    def _success(self, subject: Subject):
        subject.set(success=True, created=True)
        self.trigger('after_save', subject)
        self._audit(subject)
        self.set_flash('success', subject)
        return self.redirect_to(subject, self.url('index'))

    def _error(self, subject: Subject):
        self.repository.discard(subject.entity)
        subject.set(success=False, created=False)
        self.trigger('after_save', subject)
        audit_logger.log_validation_failure(
            controller=self.controller_name,
            action=self.name,
            error_count=count_errors(subject.entity.errors)
        )
        self.set_flash('error', subject)
        return self.render(subject)

    def view_vars(self, subject: Subject):
        view_vars = super().view_vars(subject)
        entity = subject.get('entity')
        view_vars.update(
            entity=entity,
            errors=entity.errors if entity is not None else {},
            fields=self.repository.form_fields(),
            legend=self.config['legend'].format(title=self.resource_title),
        )
        view_vars[self.resource_name] = entity
        return view_vars
