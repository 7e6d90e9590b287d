"""
Optional development seeding script.

Creates one user per role, registers two projects, submits MRV data for
the first and approves it so the public dashboard and buyer views have
something to show. Prints the bearer tokens for manual API calls.
"""

import asyncio

from samudra.core.config import get_settings
from samudra.core.database import AsyncSessionLocal, init_db
from samudra.handlers.auth import LocalAuthProvider, login, signup
from samudra.handlers.chain import SimulatedChainClient
from samudra.handlers.mrv import approve_mrv, submit_mrv_data
from samudra.handlers.projects import create_project
from samudra.models.mrv import MRVCreate, MRVRawData
from samudra.models.project import ProjectCreate
from samudra.models.user import SignupRequest

DEMO_PASSWORD = "blue-carbon-demo"

DEMO_USERS = [
    ("manager@samudra.example", "Sundarbans Field Team", "project_manager"),
    ("nccr.admin@gov.in", "NCCR Admin", "nccr_verifier"),
    ("buyer@samudra.example", "Coastal Offsets Ltd", "buyer"),
]


async def seed_data():
    """Seed database with sample data for development."""
    await init_db()
    settings = get_settings()
    auth = LocalAuthProvider()
    chain = SimulatedChainClient()

    async with AsyncSessionLocal() as session:
        users = {}
        for email, name, role in DEMO_USERS:
            result = await signup(
                session,
                auth,
                SignupRequest(email=email, password=DEMO_PASSWORD, name=name, role=role),
                settings.nccr_verifier_allowlist
            )
            logged_in = await login(session, auth, email, DEMO_PASSWORD)
            users[role] = result["user"]
            print(f"Created {role}: {email} token={logged_in['accessToken']}")

        manager = users["project_manager"]
        sundarbans = await create_project(session, ProjectCreate(
            name="Sundarbans Mangrove Restoration",
            description=(
                "Community-led mangrove restoration and conservation with satellite "
                "monitoring, biodiversity baseline surveys and stakeholder MRV."
            ),
            location="Sundarbans, West Bengal",
            ecosystem_type="mangrove",
            area=2000,
            community_partners="Gosaba fishing cooperatives",
            expected_carbon_capture=1200
        ), manager, chain)
        print(f"Created project: {sundarbans.id}")

        chilika = await create_project(session, ProjectCreate(
            name="Chilika Seagrass Meadows",
            description="Seagrass meadow protection across the Chilika lagoon.",
            location="Chilika, Odisha",
            ecosystem_type="seagrass",
            area=450
        ), manager, chain)
        print(f"Created project: {chilika.id}")

        mrv = await submit_mrv_data(session, MRVCreate(
            project_id=sundarbans.id,
            raw_data=MRVRawData(
                satellite_data="Sentinel-2 NDVI composite shows canopy cover up 14% across restored plots since baseline.",
                community_reports="Village monitors report seedling survival above 80% in the 2024 planting blocks.",
                notes="Quarterly report, Q2"
            )
        ), manager.id)
        await approve_mrv(session, mrv.id, users["nccr_verifier"].id, True, "Seed approval", chain)
        print(f"Approved MRV {mrv.id}: {mrv.ml_results.carbon_estimate} tCO2e issued")

    print("Seed data created successfully!")


if __name__ == "__main__":
    asyncio.run(seed_data())
