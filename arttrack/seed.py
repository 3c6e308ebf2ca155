#!/usr/bin/env python3
"""
Database Seeding for ArtTrack

Usage:
    python -m arttrack.seed                  # Demo commissions if the table is empty
    SEED_DEMO=true python -m arttrack.seed   # Also create the demo artist accounts

Behavior:
    - If NO commissions exist: inserts the bundled demo commissions
    - SEED_DEMO=true: creates one account per demo artist if missing,
      password taken from SEED_DEMO_PASSWORD
    - Safe to run multiple times (idempotent)

This script does NOT:
    - Auto-run on application startup
    - Modify existing users or commissions
"""

import os

from dotenv import load_dotenv

load_dotenv()

from arttrack.auth import hash_password
from arttrack.database import SessionLocal, init_db
from arttrack.demo_data import DEMO_ARTISTS, get_demo_commissions
from arttrack.models import Commission, User


def demo_email(artist: str) -> str:
    return f"artist{DEMO_ARTISTS.index(artist) + 1}@arttrack.local"


def user_exists(db, email: str, display_name: str = None) -> bool:
    """Check if a user with the given email (or display name) exists."""
    if display_name and db.query(User).filter(User.display_name == display_name).first():
        return True
    return db.query(User).filter(User.email == email).first() is not None


def seed_demo_commissions(db) -> int:
    """
    Insert the demo commissions if the table is empty.
    Returns count of commissions created.
    """
    existing = db.query(Commission).count()
    if existing > 0:
        print(f"  [SKIP] {existing} commission(s) already exist")
        return 0

    records = get_demo_commissions()
    for record in records:
        print(f"  [CREATE] {record.id} {record.title} ({record.artist_id})")
        db.add(Commission(
            id=record.id,
            artist_id=record.artist_id,
            user_id=record.user_id,
            client_name=record.client_name,
            title=record.title,
            description=record.description,
            type=record.type,
            price=record.price,
            contact=record.contact,
            notes=record.notes,
            thumbnail_url=record.thumbnail_url,
            status=record.status.value,
            date_added=record.date_added,
            last_updated=record.last_updated,
        ))
    return len(records)


def seed_demo_artists(db, password: str) -> int:
    """
    Create demo artist accounts if they don't exist.
    Returns count of users created.
    """
    created_count = 0
    for artist in DEMO_ARTISTS:
        email = demo_email(artist)
        if user_exists(db, email, artist):
            print(f"  [SKIP] Demo artist exists: {email}")
            continue
        print(f"  [CREATE] Demo artist: {email} ({artist})")
        db.add(User(
            email=email,
            display_name=artist,
            password_hash=hash_password(password),
            is_active=True,
        ))
        created_count += 1
    return created_count


def main():
    """Main seeding entry point."""
    print("=" * 60)
    print("ARTTRACK - DATABASE SEEDING")
    print("=" * 60)

    seed_demo = os.getenv("SEED_DEMO", "false").lower() == "true"
    password = os.getenv("SEED_DEMO_PASSWORD", "")
    if seed_demo and len(password) < 6:
        raise SystemExit("SEED_DEMO_PASSWORD must be at least 6 characters")

    init_db()
    db = SessionLocal()
    try:
        print("Phase 1: Demo Commissions")
        commissions_created = seed_demo_commissions(db)

        artists_created = 0
        if seed_demo:
            print("\nPhase 2: Demo Artists")
            artists_created = seed_demo_artists(db, password)
        else:
            print("\nPhase 2: Demo Artists [SKIPPED - set SEED_DEMO=true to enable]")

        db.commit()

        print("\n" + "=" * 60)
        print("SEEDING COMPLETE")
        print("=" * 60)
        print(f"Created {commissions_created} commission(s), {artists_created} artist(s)")

    except Exception as e:
        db.rollback()
        print(f"\n[ERROR] Seeding failed: {e}")
        raise

    finally:
        db.close()


if __name__ == "__main__":
    main()
