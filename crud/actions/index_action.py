"""
Index action - paginated listing of a resource
"""

from typing import Any, Dict

from flask import current_app, request

from crud.actions.base_action import BaseAction
from crud.event import Subject


class IndexAction(BaseAction):
    route = 'collection'
    template_kind = 'index'

    _defaults = {
        'order_by': 'id',
        'api': {
            'methods': ['get'],
            'success': {'code': 200},
        },
    }

    def _get(self):
        default_limit = current_app.config.get('CRUD_PAGINATION_LIMIT', 20)
        max_limit = current_app.config.get('CRUD_PAGINATION_MAX_LIMIT', 100)
        per_page = request.args.get('limit', default_limit, type=int)
        subject = self.subject(
            page=request.args.get('page', 1, type=int),
            per_page=min(per_page, max_limit),
            filters={},
            order_by=self.config['order_by']
        )
        self.trigger('before_paginate', subject)

        result = self.repository.paginate(
            page=subject.page,
            per_page=subject.per_page,
            filters=subject.filters,
            order_by=subject.order_by
        )
        subject.set(entities=result.items, pagination=result, success=True)
        self.trigger('after_paginate', subject)
        return self.render(subject)

    def view_vars(self, subject: Subject) -> Dict[str, Any]:
        view_vars = super().view_vars(subject)
        view_vars.update(
            entities=subject.get('entities', []),
            pagination=subject.get('pagination'),
            fields=self.repository.form_fields(),
        )
        view_vars[self.controller_name] = view_vars['entities']
        return view_vars

    def api_payload(self, subject: Subject) -> Dict[str, Any]:
        pagination = subject.get('pagination')
        return {
            'data': [entity.to_dict() for entity in subject.get('entities', [])],
            'pagination': pagination.to_dict() if pagination is not None else {},
        }
