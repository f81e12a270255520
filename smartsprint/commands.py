"""
Flask CLI commands.

    flask init-db                  create tables and the default admin
    flask init-db --sample-data    ...plus a sample project with three tasks
"""

import click

from smartsprint.models import db


def register_commands(app):
    @app.cli.command("init-db")
    @click.option("--sample-data", is_flag=True, help="Also create a sample project with tasks.")
    def init_db_cmd(sample_data):
        """Create tables, the default admin and (optionally) sample data."""
        from smartsprint.services.bootstrap_service import ensure_admin, seed_sample_data

        email = app.config["ADMIN_EMAIL"]
        password = app.config.get("ADMIN_PASSWORD")
        if not password:
            raise click.ClickException("ADMIN_PASSWORD environment variable is required")

        db.create_all()
        _, created = ensure_admin(email, password)
        click.echo(f"Admin {email} {'created' if created else 'already exists'}.")

        if sample_data:
            project = seed_sample_data()
            if project is None:
                click.echo("Database already contains projects. Skipping sample data.")
            else:
                click.echo(f"Sample project '{project.name}' created.")
