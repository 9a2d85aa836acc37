import logging
from datetime import timedelta

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from .models import Task, utcnow

log = logging.getLogger(__name__)

# (title, description, status, priority)
SAMPLE_TASKS = [
    ("Set up CI/CD pipeline", "Configure GitHub Actions for automated builds and deployments to staging environment", "done", "high"),
    ("Design landing page", "Create wireframes and mockups for the new product landing page", "done", "high"),
    ("Implement user authentication", "Add JWT-based authentication with login, signup, and password reset flows", "in_progress", "critical"),
    ("Write API documentation", "Document all REST endpoints using OpenAPI 3.0 specification", "in_progress", "medium"),
    ("Optimize database queries", "Profile slow queries and add appropriate indexes to the tasks and users tables", "in_progress", "high"),
    ("Add unit tests for task service", "Achieve 80% code coverage for the task CRUD service layer", "todo", "medium"),
    ("Set up monitoring alerts", "Configure alerting rules for error rate spikes, latency thresholds, and CPU usage", "todo", "high"),
    ("Implement search functionality", "Add full-text search across task titles and descriptions with pg_trgm", "todo", "medium"),
    ("Create admin dashboard", "Build an admin panel for managing users, viewing system metrics, and audit logs", "todo", "low"),
    ("Enable strict type checking", "Turn on strict mypy settings and fix all resulting type errors across the codebase", "in_progress", "medium"),
    ("Add rate limiting", "Implement API rate limiting using a sliding window counter in Redis", "todo", "high"),
    ("Fix mobile navigation bug", "Hamburger menu does not close after selecting a navigation item on iOS Safari", "todo", "critical"),
    ("Implement dark mode", "Add system-preference-aware dark mode with a manual toggle override", "done", "low"),
    ("Refactor error handling", "Centralize error handling middleware and standardize error response format", "in_progress", "medium"),
    ("Set up database backups", "Configure automated daily PostgreSQL backups with 30-day retention to S3", "todo", "critical"),
    ("Add pagination to task list", "Implement cursor-based pagination for the task listing endpoint", "done", "medium"),
    ("Review security headers", "Audit and configure Content-Security-Policy, HSTS, and X-Frame-Options headers", "todo", "high"),
    ("Performance load testing", "Run k6 load tests simulating 500 concurrent users and document bottlenecks", "todo", "medium"),
    ("Upgrade Python runtime", "Move the API from Python 3.10 to 3.12 and verify all dependencies are compatible", "todo", "low"),
    ("Integrate Slack notifications", "Send deployment status and critical alert notifications to the #engineering Slack channel", "done", "low"),
]


def seed(engine: Engine) -> int:
    """Insert SAMPLE_TASKS if the table is empty. Returns the number inserted."""
    with Session(engine) as session:
        count = session.exec(select(func.count()).select_from(Task)).one()
        if count:
            log.info("Database already seeded, skipping")
            return 0

        log.info("Seeding database with sample tasks...")
        base = utcnow()
        for i, (title, description, status, priority) in enumerate(SAMPLE_TASKS):
            # one microsecond apart so list order matches insertion order
            ts = base + timedelta(microseconds=i)
            session.add(Task(title=title, description=description, status=status,
                             priority=priority, created_at=ts, updated_at=ts))
        session.commit()
        log.info("Seeded %d tasks", len(SAMPLE_TASKS))
        return len(SAMPLE_TASKS)
