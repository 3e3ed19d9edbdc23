"""Database seed data for demos and local development."""
from datetime import date
from app.db.base import Base, engine, session_scope
from app.db.models.account import Account, BusinessUnit, EngagementType, Priority, Service
from app.db.models.note import Note
from app.db.models.task import Task, TaskStatus
from app.services.accounts import create_account

DEMO_ACCOUNTS = [
    {
        "account_name": "Tech Innovators Inc",
        "business_unit": BusinessUnit.NEW_NORTH,
        "engagement_type": EngagementType.STRATEGIC,
        "priority": Priority.TIER_1,
        "account_manager": "John Smith",
        "team_manager": "Sarah Johnson",
        "relationship_start_date": date(2023, 1, 1),
        "contract_start_date": date(2023, 1, 15),
        "contract_renewal_end": date(2024, 1, 15),
        "services": [Service.WEBSITE, Service.SEO, Service.CONTENT],
        "points_purchased": 1000,
        "points_delivered": 750,
        "recurring_points_allotment": 100,
        "mrr": 10000,
        "growth_in_mrr": 1000,
        "website": "https://techinnovators.com",
        "linkedin_profile": "https://linkedin.com/company/techinnovators",
        "industry": "Technology",
        "annual_revenue": 5000000,
        "employees": 50,
        "client_folder_id": "demo-folder-001",
        "client_list_task_id": "demo-list-001",
        "goals": [
            {
                "description": "Increase website traffic by 50%",
                "status": "IN_PROGRESS",
                "due_date": date(2024, 6, 30),
                "progress": 65,
            }
        ],
        "tasks": [
            {
                "name": "Website Redesign",
                "description": "Complete homepage redesign",
                "status": TaskStatus.IN_PROGRESS,
                "due_date": date(2024, 3, 1),
            }
        ],
    },
    {
        "account_name": "Global Marketing Solutions",
        "business_unit": BusinessUnit.IDEOMETRY,
        "engagement_type": EngagementType.TACTICAL,
        "priority": Priority.TIER_2,
        "account_manager": "Emily Brown",
        "team_manager": "Michael Wilson",
        "relationship_start_date": date(2023, 6, 1),
        "contract_start_date": date(2023, 6, 15),
        "contract_renewal_end": date(2024, 6, 15),
        "services": [Service.SOCIAL, Service.PAID_MEDIA],
        "points_purchased": 800,
        "points_delivered": 600,
        "recurring_points_allotment": 75,
        "mrr": 8000,
        "growth_in_mrr": 500,
        "website": "https://globalmarketing.com",
        "linkedin_profile": "https://linkedin.com/company/globalmarketing",
        "industry": "Marketing",
        "annual_revenue": 3000000,
        "employees": 30,
        "goals": [
            {
                "description": "Achieve 20% increase in social media engagement",
                "status": "NOT_STARTED",
                "due_date": date(2024, 12, 31),
                "progress": 25,
            }
        ],
        "notes": [
            {"description": "Waiting on warehouse ids from the client team.", "created_by": "Emily Brown"},
        ],
    },
]


def create_tables():
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
    print("Database tables created.")


def seed_accounts(db) -> int:
    """Seed demo accounts. Accounts that already exist by name are skipped."""
    created = 0
    for data in DEMO_ACCOUNTS:
        data = dict(data)
        tasks = data.pop("tasks", [])
        notes = data.pop("notes", [])

        existing = db.query(Account).filter(Account.account_name == data["account_name"]).first()
        if existing:
            continue

        account = create_account(db, data)
        for task_data in tasks:
            db.add(Task(account_id=account.account_id, **task_data))
        for note_data in notes:
            db.add(Note(account_id=account.account_id, **note_data))
        db.commit()
        created += 1
    return created


def run_seed():
    """Run all seed functions."""
    print("Starting database seeding...")
    create_tables()

    try:
        with session_scope() as db:
            created = seed_accounts(db)
        print(f"Database seeding completed successfully! {created} account(s) created.")
    except Exception as e:
        print(f"Error during seeding: {e}")
        raise


if __name__ == "__main__":
    run_seed()
