"""Seed script for initial data.

Running this script populates the database with a demo user and a
handful of example resources. Run it from the repository root with
``python -m seed.seed``.
"""
from __future__ import annotations

from datetime import datetime

from reliefhub import create_app, db
from reliefhub.models import Resource, User


def run_seeds() -> None:
    """Insert a demo user and example resources into the database."""
    app = create_app()
    with app.app_context():
        db.create_all()
        if User.query.filter_by(username="demo").first():
            print("Seed data already present.")
            return

        demo = User(username="demo")
        demo.set_password("password")
        db.session.add(demo)
        db.session.flush()

        resources = [
            Resource(
                user_id=demo.id,
                types=["shelter", "food"],
                title="Community hall shelter",
                description="Cots, blankets and hot meals for displaced families",
                location="Riverside Community Hall",
                capacity=40,
                phone="555-0100",
            ),
            Resource(
                user_id=demo.id,
                types=["water"],
                title="Bottled water pickup",
                description="Cases of bottled water, one per household",
                location="Main Street fire station",
            ),
            Resource(
                user_id=demo.id,
                types=["transportation", "medical"],
                title="Rides to the clinic",
                description="Volunteer drivers for medical appointments",
                location="North side",
                email="rides@example.org",
                available=False,
            ),
        ]
        for resource in resources:
            resource.image_urls = []
            resource.created_at = datetime.utcnow()
        db.session.add_all(resources)
        db.session.commit()
        print("Seed data inserted successfully.")


if __name__ == "__main__":
    run_seeds()
