# commands.py

import click
from flask import current_app
from flask.cli import with_appcontext


@click.command('seed-blogs')
@click.option('--count', default=5, show_default=True, help='Number of blogs to create')
@with_appcontext
def seed_blogs(count):
    """Create sample blog posts"""
    repository = current_app.services.get('blog_repository')
    
    created = 0
    for number in range(1, count + 1):
        entity = repository.new_entity({
            'name': f'Sample blog post {number}',
            'body': f'Body of sample blog post {number}'
        })
        if repository.save(entity):
            created += 1
        else:
            click.echo(f'Failed to create blog {number}: {entity.errors}')
    
    click.echo(f'Created {created} blog(s)')


def init_app(app):
    """Register commands with the Flask app"""
    app.cli.add_command(seed_blogs)
