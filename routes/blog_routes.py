"""
Blog routes - CRUD controller for blog posts
"""

from crud.actions import AddAction, DeleteAction, EditAction, IndexAction, ViewAction
from crud.controller import CrudController


class BlogsController(CrudController):
    """
    /blogs, /blogs/add, /blogs/edit/<id>, /blogs/view/<id>, /blogs/delete/<id>
    and their .json variants.
    """
    name = 'blogs'
    repository = 'blog_repository'
    resource = 'blog'
    actions = {
        'index': IndexAction,
        'add': AddAction,
        'edit': EditAction,
        'view': ViewAction,
        'delete': DeleteAction,
    }
    listeners = {
        'api': 'api',
        'redirect': 'redirect',
    }
