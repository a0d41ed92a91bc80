"""Export utilities for lookup results."""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel

from bgcheck.models.result import LookupOutcome, LookupResult


def to_json(result: BaseModel, indent: int = 2) -> str:
    """
    Convert a lookup or evaluation result to a JSON string.

    Args:
        result: LookupResult, EvaluationResult or any other model
        indent: JSON indentation level

    Returns:
        JSON string
    """
    return result.model_dump_json(indent=indent)


def to_dict(result: BaseModel) -> dict:
    """Convert a result model to a JSON-compatible dictionary."""
    return result.model_dump(mode="json")


def save_json(
    result: BaseModel,
    filepath: str | Path,
    indent: int = 2,
) -> Path:
    """
    Save a result model to a JSON file.

    Args:
        result: Model to save
        filepath: Output file path
        indent: JSON indentation level

    Returns:
        Path to saved file
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(result.model_dump_json(indent=indent), encoding="utf-8")
    return path


def save_many_json(
    outcomes: list[LookupOutcome],
    output_dir: str | Path,
    filename_template: str = "{account_id}.json",
) -> list[Path]:
    """
    Save each successful lookup of a batch to its own JSON file.

    Args:
        outcomes: Batch lookup outcomes
        output_dir: Directory for output files
        filename_template: Template with {account_id} placeholder

    Returns:
        List of paths to saved files
    """
    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    saved = []
    for outcome in outcomes:
        if outcome.success and outcome.result:
            filepath = output_path / filename_template.format(account_id=outcome.account_id)
            save_json(outcome.result, filepath)
            saved.append(filepath)

    return saved


def load_json(filepath: str | Path) -> LookupResult:
    """Load a LookupResult from a JSON file."""
    path = Path(filepath)
    return LookupResult.model_validate_json(path.read_text(encoding="utf-8"))


def merge_results(outcomes: list[LookupOutcome]) -> dict:
    """
    Summarize a batch into one export-friendly dict, one row per account.

    Args:
        outcomes: Batch lookup outcomes

    Returns:
        Dict with 'accounts' rows plus success/failure counts
    """
    rows = []
    for outcome in outcomes:
        row: dict = {"account_id": outcome.account_id, "success": outcome.success}
        if outcome.result:
            profile = outcome.result.profile
            row.update(
                username=profile.username,
                account_age_days=profile.account_age_days,
                friends_count=profile.friends_count,
                groups_count=profile.groups_count,
                total_badges=profile.total_badges,
                risk_level=outcome.result.risk.level.value,
                risk_score=outcome.result.risk.score,
            )
        else:
            row["error"] = outcome.error_message
        rows.append(row)

    return {
        "exported_at": datetime.now().isoformat(),
        "successful": sum(1 for o in outcomes if o.success),
        "failed": sum(1 for o in outcomes if not o.success),
        "accounts": rows,
    }
