"""Plain-text and JSON-friendly battle reports."""

from typing import Any, Dict, List

from auto_battle.records import BattleResult, RoundRecord


def format_round(result: BattleResult, record: RoundRecord) -> str:
    a = result.combatant_a.name
    b = result.combatant_b.name
    return (
        f"Round {record.index}: {a} hits for {record.damage_a}, "
        f"{b} hits for {record.damage_b} -> "
        f"{a}: {record.vitality_a}, {b}: {record.vitality_b}"
    )


def format_result(result: BattleResult, show_rounds: bool = True) -> str:
    """Render ``result`` as human-readable lines.

    The header lists both combatants with their starting vitality, followed
    by one line per round (when ``show_rounds``) and the verdict.
    """
    a = result.combatant_a
    b = result.combatant_b
    lines: List[str] = [f"{a.name} ({a.vitality}) vs {b.name} ({b.vitality})"]
    if show_rounds:
        lines.extend(format_round(result, record) for record in result.rounds)
    if result.is_draw:
        lines.append(f"Draw after {result.round_count} rounds")
    else:
        lines.append(f"Winner: {result.winner} after {result.round_count} rounds")
    return "\n".join(lines)


def result_to_dict(result: BattleResult) -> Dict[str, Any]:
    """Serialize ``result`` into plain JSON types."""
    return {
        "combatant_a": {
            "name": result.combatant_a.name,
            "vitality": result.combatant_a.vitality,
            "source_id": result.combatant_a.source_id,
        },
        "combatant_b": {
            "name": result.combatant_b.name,
            "vitality": result.combatant_b.vitality,
            "source_id": result.combatant_b.source_id,
        },
        "outcome": result.outcome.value,
        "winner": result.winner,
        "final_vitality_a": result.final_vitality_a,
        "final_vitality_b": result.final_vitality_b,
        "rounds": [
            {
                "index": r.index,
                "damage_a": r.damage_a,
                "damage_b": r.damage_b,
                "vitality_a": r.vitality_a,
                "vitality_b": r.vitality_b,
            }
            for r in result.rounds
        ],
    }
