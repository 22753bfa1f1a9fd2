"""
Seed the LOB / Sub-LOB catalog for development.
Run: python -m scripts.seed_lobs  (from backend/)

Existing LOBs and Sub-LOBs (matched by code) are left untouched.
"""

import asyncio

from app.core.logging import get_logger
from app.db.session import async_session
from app.repositories import catalog as catalog_repository

logger = get_logger(__name__)

# (code, name, default brokerage %, minimum premium, rate basis, [(sub code, sub name), ...])
SEED_LOBS = [
    ("MOTOR", "Motor Insurance", "12.5", "5000", "Premium", [
        ("MOTOR-PVT", "Private Motor"),
        ("MOTOR-COM", "Commercial Motor"),
        ("MOTOR-MC", "Motor Cycle"),
        ("MOTOR-FLEET", "Motor Fleet"),
    ]),
    ("FIRE", "Fire & Special Perils", "15", "10000", "Sum Insured", [
        ("FIRE-FSP", "Fire & Special Perils"),
        ("FIRE-CL", "Consequential Loss"),
        ("FIRE-BURG", "Burglary"),
        ("FIRE-STK", "Stock"),
    ]),
    ("MARINE", "Marine Insurance", "15", "15000", "Sum Insured", [
        ("MARINE-CARGO", "Marine Cargo"),
        ("MARINE-HULL", "Marine Hull"),
        ("MARINE-INLAND", "Inland Transit"),
        ("MARINE-AR", "All Risks"),
    ]),
    ("ENGINEERING", "Engineering Insurance", "15", "20000", "Sum Insured", [
        ("ENG-CAR", "Contractors All Risks"),
        ("ENG-EAR", "Erection All Risks"),
        ("ENG-MB", "Machinery Breakdown"),
        ("ENG-EE", "Electronic Equipment"),
        ("ENG-BPV", "Boiler & Pressure Vessel"),
    ]),
    ("LIABILITY", "Liability Insurance", "15", "15000", "Premium", [
        ("LIAB-PUB", "Public Liability"),
        ("LIAB-PROD", "Product Liability"),
        ("LIAB-PI", "Professional Indemnity"),
        ("LIAB-EMP", "Employers Liability"),
        ("LIAB-DO", "Directors & Officers"),
    ]),
    ("ACCIDENT", "Accident & Health", "12.5", "5000", "Premium", [
        ("ACC-PA", "Personal Accident"),
        ("ACC-GPA", "Group Personal Accident"),
        ("ACC-HI", "Health Insurance"),
        ("ACC-TRV", "Travel Insurance"),
    ]),
    ("BOND", "Bonds & Guarantees", "10", "25000", "Bond Value", [
        ("BOND-PERF", "Performance Bond"),
        ("BOND-APG", "Advance Payment Bond"),
        ("BOND-BID", "Bid Bond"),
    ]),
    ("AVIATION", "Aviation Insurance", "15", "50000", "Sum Insured", [
        ("AVI-HULL", "Aviation Hull"),
        ("AVI-LIAB", "Aviation Liability"),
    ]),
    ("ENERGY", "Energy Insurance", "15", "100000", "Sum Insured", [
        ("ENERGY-OFF", "Offshore Energy"),
        ("ENERGY-ON", "Onshore Energy"),
    ]),
    ("CYBER", "Cyber Insurance", "12.5", "50000", "Premium", [
        ("CYBER-LIAB", "Cyber Liability"),
        ("CYBER-DATA", "Data Breach"),
    ]),
    ("AGRIC", "Agricultural Insurance", "10", "10000", "Sum Insured", [
        ("AGRIC-CROP", "Crop Insurance"),
        ("AGRIC-LIVE", "Livestock Insurance"),
    ]),
    ("SPECIAL", "Special Risks", "15", "20000", "Premium", [
        ("SPEC-KR", "Kidnap & Ransom"),
        ("SPEC-PV", "Political Violence"),
    ]),
]


async def seed():
    """Insert seed LOBs and their Sub-LOBs."""
    created_lobs = created_subs = 0
    async with async_session() as session:
        for code, name, brokerage, minimum, rate_basis, sub_lobs in SEED_LOBS:
            lob = await catalog_repository.get_lob_by_code(session, code)
            if lob is None:
                lob = await catalog_repository.create_lob(
                    session,
                    code=code,
                    name=name,
                    default_brokerage_pct=brokerage,
                    min_premium=minimum,
                )
                lob.rate_basis = rate_basis
                created_lobs += 1
                logger.info("LOB created", code=code, lob_id=lob.id)

            for sub_code, sub_name in sub_lobs:
                if await catalog_repository.get_sub_lob_by_code(session, lob.id, sub_code) is None:
                    await catalog_repository.create_sub_lob(session, lob_id=lob.id, code=sub_code, name=sub_name)
                    created_subs += 1
        await session.commit()
    print(f"Seeded {created_lobs} LOBs and {created_subs} Sub-LOBs.")


if __name__ == "__main__":
    asyncio.run(seed())
