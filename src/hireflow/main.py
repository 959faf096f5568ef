"""
Main entry point for the HireFlow AI backend.

``hireflow serve`` runs the HTTP API; ``hireflow ingest`` indexes a resume
from the command line.
"""

import argparse
import asyncio
import json
import logging
import sys

from hireflow.config import get_settings


def setup_logging() -> None:
    """Configure application logging."""
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="hireflow", description="HireFlow AI interview backend")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    ingest = sub.add_parser("ingest", help="Index a resume file")
    ingest.add_argument("path", help="PDF or DOCX resume")
    ingest.add_argument("--candidate-id", default=None, help="Identifier to store the resume under")
    ingest.add_argument(
        "--questions",
        action="store_true",
        help="Also generate interview questions tailored to the resume",
    )
    ingest.add_argument(
        "--required-skills",
        default="",
        help="Comma-separated skills to match the resume against",
    )
    return parser


def serve(args: argparse.Namespace) -> None:
    """Run the API under uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "hireflow.api.app:create_app",
        factory=True,
        host=args.host or settings.host,
        port=args.port or settings.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


async def run_ingest(args: argparse.Namespace) -> None:
    """Ingest one resume and print the result as JSON."""
    from hireflow.agents.resume_parser import calculate_skill_match, describe_questions
    from hireflow.container import ServiceContainer

    logger = logging.getLogger(__name__)
    container = await ServiceContainer.create(get_settings())
    try:
        result = await container.ingestion.ingest_from_file(args.path, candidate_id=args.candidate_id)
        print(json.dumps(result.to_json_dict(), indent=2))

        if args.required_skills:
            required = [s.strip() for s in args.required_skills.split(",") if s.strip()]
            match = calculate_skill_match(result.skills, required)
            print(json.dumps(match.model_dump(), indent=2))

        if args.questions:
            if result.parsed_data is None:
                logger.warning("Resume could not be parsed; skipping question generation")
            else:
                questions = await container.resume_parser.generate_tailored_questions(result.parsed_data)
                print(describe_questions(questions))
    finally:
        await container.close()


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the application."""
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        if args.command == "serve":
            serve(args)
        else:
            asyncio.run(run_ingest(args))
    except KeyboardInterrupt:
        print("\nStopped by user.")
        sys.exit(0)
    except Exception as e:
        logging.error(f"Application error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
