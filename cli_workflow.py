#!/usr/bin/env python3
"""
CLI workflow runner for the detect -> edit -> extract pipeline.

Logs in, uploads an image, applies region moves and toggles given on the
command line, then extracts the text against the configured backend.

Example:
    python cli_workflow.py page.png --email me@example.com \\
        --move r3:up --disable r5 --output page.txt
"""
import argparse
import asyncio
import os
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent))

from config.logging_config import setup_logging
from config.settings import get_settings
from core.exceptions import SmartLensError
from core.models import WorkflowState
from core.workflow import ExtractionGate
from data.database import DatabaseManager
from services.account_service import AccountService
from services.backend_client import BackendClient
from services.credentials import create_credential_provider
from services.ocr_service import OCRService
from services.session_store import SessionStore
from services.workflow_service import WorkflowController


def parse_move(value: str):
    """Parse 'REGION_ID:up|down'."""
    region_id, sep, direction = value.rpartition(':')
    if not sep or not region_id:
        raise argparse.ArgumentTypeError(f"Expected ID:up or ID:down, got {value!r}")
    return region_id, direction


def print_regions(session):
    for region in session.regions:
        flag = ' ' if region.is_active else 'x'
        print(f"  [{flag}] {region.order:>3}  {region.id:<12} {region.description}")


async def run_workflow(args) -> int:
    settings = get_settings()
    backend = BackendClient(
        settings.backend_url,
        credentials=create_credential_provider(settings),
        timeout=settings.backend_timeout
    )
    db = DatabaseManager(args.database_url or settings.database_url)
    db.create_tables()
    controller = WorkflowController(
        ocr=OCRService(backend),
        accounts=AccountService(backend),
        store=SessionStore(db),
        extraction_cost=settings.extraction_cost
    )

    try:
        print("=" * 60)
        print(f"Processing: {args.image}")
        print("=" * 60)

        session = await controller.login(args.email)
        print(f"Logged in as {session.user.email} ({session.user.credits} credits)")

        with open(args.image, 'rb') as f:
            content = f.read()
        await controller.upload(session, content)
        if session.state is not WorkflowState.INTERACTING:
            print(f"❌ Error: {session.error}")
            return 1

        print(f"Detected {len(session.regions)} regions:")
        print_regions(session)

        for region_id, direction in args.move:
            session.move(region_id, direction)
        for region_id in args.disable:
            session.toggle(region_id)
        if args.move or args.disable:
            print("After edits:")
            print_regions(session)

        gate = await controller.extract(session)
        if gate is ExtractionGate.NO_CREDITS:
            print("❌ No credits left. Purchase a plan to continue.")
            return 1
        if gate is ExtractionGate.NO_ACTIVE_REGIONS:
            print("❌ No active regions to extract.")
            return 1
        if session.state is not WorkflowState.FINISHED:
            print(f"❌ Error: {session.error}")
            return 1
        if session.error:
            print(f"⚠ {session.error}")

        if args.output:
            with open(args.output, 'w', encoding='utf-8') as f:
                f.write(session.final_text)
            print(f"✓ Text written to {args.output}")
        else:
            print()
            print(session.final_text)
        print(f"Remaining credits: {session.user.credits}")
        return 0
    finally:
        await backend.aclose()
        db.dispose()


def main():
    parser = argparse.ArgumentParser(description='SmartLens OCR workflow CLI')
    parser.add_argument('image', help='Image file to process')
    parser.add_argument('--email', required=True, help='Account email')
    parser.add_argument('--move', type=parse_move, action='append', default=[],
                        metavar='ID:DIR', help='Move a region up or down (repeatable)')
    parser.add_argument('--disable', action='append', default=[], metavar='ID',
                        help='Exclude a region from extraction (repeatable)')
    parser.add_argument('--output', help='Write extracted text to this file')
    parser.add_argument('--database-url', default=None, help='Override DATABASE_URL')
    args = parser.parse_args()

    setup_logging(get_settings().log_level)

    if not os.path.exists(args.image):
        print(f"❌ Error: File not found: {args.image}")
        sys.exit(1)

    try:
        code = asyncio.run(run_workflow(args))
    except (SmartLensError, ValueError) as e:
        print(f"❌ Error: {e}")
        code = 1
    sys.exit(code)


if __name__ == '__main__':
    main()
