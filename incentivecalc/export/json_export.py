"""Native JSON export for calculation results.

Exports full CalculationResult models as JSON using Pydantic serialization.
"""

from typing import Any

from incentivecalc.models import CalculationResult


def result_to_json(result: CalculationResult) -> dict[str, Any]:
    """Export a calculation result as a JSON-serializable dictionary.

    Args:
        result: Calculation result.

    Returns:
        Dictionary with enums and nested models rendered as JSON values.
    """
    return result.model_dump(mode="json")


def results_to_json(results: list[CalculationResult]) -> list[dict[str, Any]]:
    """Export several calculation results.

    Args:
        results: Calculation results.

    Returns:
        List of JSON-serializable dictionaries.
    """
    return [result_to_json(r) for r in results]
