"""
Seed Script: first administrator
Creates the admin account from SEED_ADMIN_* variables or interactive prompts

Usage:
    python migrations/seed_admin.py
    flask seed-admin
"""

import os
import sys
from getpass import getpass

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from flask import current_app
from sqlalchemy import func
from extensions import db
from models import User, AuditAction, AuditTargetType
from utils.security import hash_password, log_audit_event


def seed_admin(email, password, name):
    """
    Upsert the admin user by email and record the seeding in the audit log

    An existing user with that email is left as it is.

    Returns:
        tuple: (User, created)
    """
    if not email or not password:
        raise ValueError('Admin email and password are required')

    email = email.strip().lower()
    user = User.query.filter(func.lower(User.email) == email).first()
    created = user is None
    try:
        if created:
            user = User(
                name=name,
                email=email,
                password_hash=hash_password(password),
                role='admin'
            )
            db.session.add(user)
            db.session.flush()

        log_audit_event(AuditAction.CREATE, AuditTargetType.USER, user.id,
                        meta={'createdBy': 'Seed', 'role': 'admin'})
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    if created:
        current_app.logger.info(f"Seeded admin user {email}")
    else:
        current_app.logger.info(f"Admin user {email} already exists, left unchanged")
    return user, created


def read_credentials(config):
    """Credentials from config/environment, prompting when any is missing"""
    email = config.get('SEED_ADMIN_EMAIL')
    password = config.get('SEED_ADMIN_PASSWORD')
    name = config.get('SEED_ADMIN_NAME')

    if not email or not password or not name:
        email = input("Admin email: ").strip()
        password = getpass("Admin password: ")
        name = input("Admin name: ").strip()

    return email, password, name


def main():
    from app import create_app

    app = create_app()
    with app.app_context():
        print("Seeding admin...")
        email, password, name = read_credentials(app.config)
        try:
            user, created = seed_admin(email, password, name)
        except Exception as e:
            print(f"Seeding failed: {str(e)}")
            sys.exit(1)
        print(f"{'Created' if created else 'Kept existing'} admin {user.email}")
        print("Seeding finished.")


if __name__ == '__main__':
    main()
