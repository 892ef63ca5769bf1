#!/usr/bin/env python3
"""
YouTube Content Optimizer - Command Line Orchestrator

Handles the complete pipeline: Script → Prompt → Generated SEO pack → Sections → Checks → Export
"""

import sys
import uuid
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, List

import structlog
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from config import config
from core.generate import (
    analyze_script,
    GenerationError
)
from core.prompt import PromptError
from core.validate import (
    build_report,
    MetadataSchema,
    ResponseReport
)
from core.export import (
    export_markdown,
    export_metadata_json,
    ExportError
)
from storage import LocalCache, StorageError

# Configure structured logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.dev.ConsoleRenderer(colors=True)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


class ScriptReadError(Exception):
    """Script file missing or unreadable"""
    pass


USAGE = """Usage: python main.py <script_file|-> [--export-dir DIR]
       python main.py --from-cache [--export-dir DIR]
       python main.py --clear

Examples:
  python main.py my_script.txt
  cat my_script.txt | python main.py - --export-dir out/
  python main.py --from-cache --export-dir out/"""


class OptimizationJob(BaseModel):
    """One script optimization run with results and tracking"""

    # Job identification
    job_id: str = Field(description="Unique job identifier")
    start_time: datetime = Field(default_factory=datetime.now)
    end_time: Optional[datetime] = None
    status: str = Field(default="running", description="Job status")
    error_message: Optional[str] = None

    # Inputs and outputs
    script_chars: int = Field(default=0, ge=0)
    result_text: Optional[str] = Field(None, description="Raw generated response")
    report: Optional[ResponseReport] = Field(None, description="Parsed and checked response")
    from_cache: bool = False
    exported_files: List[str] = Field(default_factory=list)

    # API usage tracking
    model: Optional[str] = None
    token_usage: Dict[str, int] = Field(default_factory=dict)
    generation_seconds: Optional[float] = None

    def duration_seconds(self) -> float:
        """Calculate job duration in seconds"""
        end = self.end_time or datetime.now()
        return (end - self.start_time).total_seconds()

    def mark_completed(self):
        """Mark job as completed successfully"""
        self.end_time = datetime.now()
        self.status = "completed"

    def mark_failed(self, error: str):
        """Mark job as failed with error message"""
        self.end_time = datetime.now()
        self.status = "failed"
        self.error_message = error


class ProgressTracker:
    """Step progress printing with structured logging"""

    def __init__(self):
        self.step_names = [
            "📝 Loading script",
            "🤖 Generating SEO pack",
            "🔎 Checking sections",
            "💾 Exporting files"
        ]
        self.total_steps = len(self.step_names)

    def start_step(self, step_index: int):
        """Start a processing step"""
        progress = (step_index / self.total_steps) * 100
        step_name = self.step_names[step_index]

        print(f"\n[{progress:.0f}%] {step_name}")
        logger.info("Processing step started",
                    step=step_name,
                    step_index=step_index,
                    progress_percent=progress)

    def complete_step(self, step_index: int):
        """Complete a processing step"""
        progress = ((step_index + 1) / self.total_steps) * 100
        step_name = self.step_names[step_index]

        print(f"[{progress:.0f}%] ✅ {step_name}")
        logger.info("Processing step completed",
                    step=step_name,
                    step_index=step_index,
                    progress_percent=progress)

    def show_final_summary(self, job: OptimizationJob):
        """Show checklist and final job summary"""
        print(f"\n{'='*60}")
        print("🎉 Optimization Complete!" if job.status == "completed" else "⚠️  Optimization Finished")
        print(f"{'='*60}")
        print(f"⏱️  Total Time: {job.duration_seconds():.1f}s")
        print(f"📊 Status: {job.status}")
        if job.from_cache:
            print("♻️  Source: cached result")
        if job.token_usage:
            print(f"💰 Tokens Used: {job.token_usage.get('total_tokens', 0):,}")

        report = job.report
        if report is None:
            return

        print(f"\nRequired sections ({len(report.checklist) - len(report.missing_sections)}/{len(report.checklist)}):")
        for name, present in report.checklist.items():
            print(f"  {'🟢' if present else '🔴'} {name}")

        if report.title_check:
            check = report.title_check
            note = " (trim recommended)" if check.too_long else ""
            print(f"\n🏷️  Title length: {check.length} / {check.max_length}{note}")

        if report.metadata.failed:
            print(f"🧾 Metadata JSON check: {report.metadata.reason}")
        elif report.metadata.ok:
            print("🧾 Metadata JSON check: passed")

        for path in job.exported_files:
            print(f"📄 Exported: {path}")


def render_sections(report: ResponseReport):
    """Print every section the way the web form shows its cards"""
    for section in report.sections:
        print(f"\n### {section.title}")
        if section.content:
            print(section.content)


def generate_job_id() -> str:
    """Generate a unique job ID with UUID suffix for uniqueness"""
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    unique_suffix = str(uuid.uuid4())[:8]
    return f"{timestamp}_{unique_suffix}"


def read_script(source: str) -> str:
    """Read the script from a file path, or stdin for '-'"""
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.exists():
        raise ScriptReadError(f"Script file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise ScriptReadError(f"Could not read script file {path}: {e}")


def check_result(result_text: str) -> ResponseReport:
    validation = config.validation
    schema = MetadataSchema(
        default_language=validation.default_language,
        default_audio_language=validation.default_audio_language,
        section_title=validation.metadata_section_title
    )
    return build_report(
        result_text,
        validation.required_sections,
        schema=schema,
        max_title_length=validation.max_title_length
    )


def export_result(job: OptimizationJob, export_dir: Path):
    """Write the Markdown pack and, when extractable, metadata.json"""
    job.exported_files.append(str(export_markdown(job.result_text, export_dir)))
    try:
        path = export_metadata_json(
            job.report.sections,
            export_dir,
            section_title=config.validation.metadata_section_title
        )
        job.exported_files.append(str(path))
    except ExportError as e:
        logger.warning("Metadata export skipped", reason=str(e))
        print(f"⏭️  Skipping metadata.json: {e}")


def optimize_script(
    source: Optional[str],
    export_dir: Optional[Path] = None,
    from_cache: bool = False,
    cache: Optional[LocalCache] = None
) -> OptimizationJob:
    """Run one optimization job from a script source or the cached result"""

    cache = cache or LocalCache()
    progress = ProgressTracker()
    job = OptimizationJob(job_id=generate_job_id(), from_cache=from_cache)

    logger.info("Starting script optimization",
                job_id=job.job_id,
                source=source,
                from_cache=from_cache)

    print("🎬 YouTube Content Optimizer (US)")
    print(f"📋 Job ID: {job.job_id}")
    print("="*60)

    try:
        # Step 1: Load script (or cached result)
        progress.start_step(0)
        if from_cache:
            job.result_text = cache.load_result()
            if not job.result_text:
                raise GenerationError("No cached result available")
            print(f"♻️  Loaded cached result: {len(job.result_text):,} characters")
        else:
            script = read_script(source)
            cache.save_script(script)
            if not script.strip():
                raise PromptError("Script is empty")
            job.script_chars = len(script)
            print(f"📝 Script: {len(script):,} characters")
        progress.complete_step(0)

        # Step 2: Generate
        if not from_cache:
            progress.start_step(1)
            print(f"🤖 Using {config.generation.openai_model}...")
            result = analyze_script(script)
            job.result_text = result.text
            job.model = result.model
            job.token_usage = result.token_usage
            job.generation_seconds = result.processing_time
            cache.save_result(result.text)
            progress.complete_step(1)

        # Step 3: Parse and check
        progress.start_step(2)
        job.report = check_result(job.result_text)
        render_sections(job.report)
        progress.complete_step(2)

        # Step 4: Export
        if export_dir is not None:
            progress.start_step(3)
            export_result(job, export_dir)
            progress.complete_step(3)

        job.mark_completed()

    except PromptError as e:
        error_msg = f"Script error: {e}"
        logger.error("Script rejected", error=str(e))
        print(f"\n❌ {error_msg}")
        job.mark_failed(error_msg)

    except GenerationError as e:
        error_msg = f"Generation error: {e}"
        logger.error("Generation failed", error=str(e))
        print(f"\n❌ {error_msg}")
        job.mark_failed(error_msg)

    except (ScriptReadError, ExportError, StorageError) as e:
        error_msg = f"File error: {e}"
        logger.error("File operation failed", error=str(e))
        print(f"\n❌ {error_msg}")
        job.mark_failed(error_msg)

    progress.show_final_summary(job)
    return job


def parse_args(argv: List[str]) -> Dict[str, object]:
    """Minimal flag parsing: one positional source plus a few flags"""
    args = {"source": None, "export_dir": None, "from_cache": False, "clear": False}
    remaining = list(argv)
    while remaining:
        arg = remaining.pop(0)
        if arg == "--from-cache":
            args["from_cache"] = True
        elif arg == "--clear":
            args["clear"] = True
        elif arg == "--export-dir":
            if not remaining:
                raise ValueError("--export-dir requires a directory")
            args["export_dir"] = Path(remaining.pop(0))
        elif arg.startswith("--"):
            raise ValueError(f"Unknown option: {arg}")
        elif args["source"] is None:
            args["source"] = arg
        else:
            raise ValueError(f"Unexpected argument: {arg}")
    return args


def main():
    """Main entry point with argument parsing"""

    try:
        args = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"❌ Error: {e}")
        print(USAGE)
        sys.exit(1)

    if args["clear"]:
        LocalCache().clear()
        print("🧹 Cached script and result cleared")
        sys.exit(0)

    if not args["source"] and not args["from_cache"]:
        print(USAGE)
        sys.exit(1)

    # Show configuration info
    if config.debug:
        print("🔧 Debug mode enabled")
        print(f"🤖 AI Model: {config.generation.openai_model}")
        print(f"💾 Cache: {config.storage.cache_path}")
        print()

    export_dir = args["export_dir"] or config.storage.export_dir
    job = optimize_script(
        args["source"],
        export_dir=export_dir,
        from_cache=args["from_cache"]
    )

    # Exit with appropriate code
    if job.status == "completed":
        print("\n✨ Optimization completed successfully!")
        sys.exit(0)
    else:
        print(f"\n💥 Optimization failed: {job.error_message}")
        sys.exit(1)


if __name__ == "__main__":
    main()
