"""Populate the incidents table with randomized sample records.

    tracker-seed --count 200
"""

import logging
import random
from datetime import datetime, timedelta

import click
from sqlalchemy import delete
from sqlalchemy.orm import Session as DBSession

from tracker.config import settings
from tracker.database import create_db_engine, create_session_factory, init_db
from tracker.models.incident import Incident, Severity, Status
from tracker.schemas.incident import IncidentCreate
from tracker.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

SERVICES = [
    "Auth Service",
    "Payment Service",
    "User Service",
    "API Gateway",
    "Database",
    "Cache Layer",
    "Email Service",
    "Notification Service",
    "Analytics Service",
    "Storage Service",
]

OWNERS = [
    "john@example.com",
    "sarah@example.com",
    "mike@example.com",
    "emma@example.com",
    "david@example.com",
    None,
]

TITLES = [
    "High latency detected",
    "Service unavailable",
    "Database connection timeout",
    "Memory leak detected",
    "API rate limit exceeded",
    "Failed deployment",
    "Disk space critical",
    "SSL certificate expiring",
    "Authentication failures",
    "Payment processing errors",
    "Cache invalidation issue",
    "CDN performance degradation",
    "Load balancer misconfiguration",
    "Background job failures",
    "5xx errors spike",
    "Slow query performance",
    "Network connectivity issues",
    "Third-party API outage",
    "Data inconsistency detected",
    "Security vulnerability found",
]

SUMMARIES = [
    "System experiencing degraded performance due to high traffic load.",
    "Critical service outage affecting multiple customers.",
    "Database queries timing out, investigating connection pool.",
    "Memory usage increasing steadily, potential memory leak in recent deployment.",
    "Rate limiting triggered due to unusual traffic patterns.",
    "Deployment rolled back due to failing health checks.",
    "Available disk space below 10%, cleanup required.",
    "SSL certificate expires in 7 days, renewal needed.",
    "Multiple authentication failures reported by users.",
    "Payment gateway returning errors for credit card transactions.",
    None,
]

MAX_AGE_DAYS = 90


def generate_incidents(count: int, rng: random.Random, now: datetime) -> list[Incident]:
    incidents = []
    for _ in range(count):
        created_at = now - timedelta(days=rng.randrange(MAX_AGE_DAYS))
        fields = IncidentCreate(
            title=rng.choice(TITLES),
            service=rng.choice(SERVICES),
            severity=rng.choice(list(Severity)),
            status=rng.choice(list(Status)),
            owner=rng.choice(OWNERS),
            summary=rng.choice(SUMMARIES),
        )
        incidents.append(Incident(**fields.model_dump(), created_at=created_at, updated_at=created_at))
    return incidents


def seed_incidents(db: DBSession, count: int, rng: random.Random, keep: bool = False) -> int:
    if not keep:
        removed = db.execute(delete(Incident)).rowcount
        logger.info("Removed %s existing incident(s)", removed)

    incidents = generate_incidents(count, rng, utcnow())
    db.add_all(incidents)
    db.commit()
    return len(incidents)


@click.command()
@click.option("--count", default=200, show_default=True, type=click.IntRange(min=0), help="Number of incidents to create.")
@click.option("--keep", is_flag=True, help="Keep existing incidents instead of clearing the table first.")
@click.option("--random-seed", type=int, default=None, help="Seed for reproducible data.")
@click.option("--database-url", default=None, help="Overrides DATABASE_URL.")
def main(count, keep, random_seed, database_url):
    """Seed the incident store with sample data."""
    logging.basicConfig(level=settings.log_level.upper(), format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    engine = create_db_engine(database_url or settings.database_url)
    init_db(engine)
    db = create_session_factory(engine)()
    try:
        created = seed_incidents(db, count, random.Random(random_seed), keep=keep)
    except Exception:
        db.rollback()
        logger.exception("Seeding failed")
        raise click.ClickException("Seeding failed, see log for details")
    finally:
        db.close()
        engine.dispose()

    click.echo(f"Seeded {created} incidents successfully!")


if __name__ == "__main__":
    main()
