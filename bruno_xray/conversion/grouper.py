"""
Result Grouper.

Partitions Bruno request results by the Jira test issues they belong to.
A request is attributed to every issue key found in its file name, so
``"collection/CYP-123 BFG-664 login.bru"`` contributes to both CYP-123 and
BFG-664. Requests without an issue key are not reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from loguru import logger

from bruno_xray.models.bruno import BrunoIteration, BrunoRequestResult


@dataclass
class TestIteration:
    """
    The requests of one iteration that belong to a single test issue.

    Attributes:
        iteration_index: Zero-based iteration index.
        parameters: Data-driven parameters of the iteration (CSV row).
        requests: Request results in encounter order.
    """

    __test__ = False

    iteration_index: int
    parameters: Dict[str, str] = field(default_factory=dict)
    requests: List[BrunoRequestResult] = field(default_factory=list)


def group_iterations(
    iterations: Sequence[BrunoIteration],
    parameters: Optional[Sequence[Dict[str, str]]] = None,
) -> Dict[str, List[TestIteration]]:
    """
    Group request results by Jira issue key, then by iteration index.

    Args:
        iterations: Bruno iterations in report order.
        parameters: Optional parameter rows, indexed by iteration index.

    Returns:
        Ordered mapping of issue key to its iterations, sorted ascending by
        iteration index. Keys appear in order of first encounter.
    """
    groups: Dict[str, Dict[int, TestIteration]] = {}
    unattributed = 0

    for iteration in iterations:
        index = iteration.iteration_index
        for result in iteration.results:
            issue_keys = result.issue_keys
            if not issue_keys:
                unattributed += 1
                continue
            for issue_key in issue_keys:
                by_index = groups.setdefault(issue_key, {})
                test_iteration = by_index.get(index)
                if test_iteration is None:
                    test_iteration = TestIteration(
                        iteration_index=index,
                        parameters=_parameters_of(parameters, index),
                    )
                    by_index[index] = test_iteration
                test_iteration.requests.append(result)

    if unattributed:
        logger.warning(
            f"{unattributed} Bruno request result(s) contain no Jira issue key "
            f"and will not be reported"
        )

    grouped = {
        issue_key: sorted(by_index.values(), key=lambda i: i.iteration_index)
        for issue_key, by_index in groups.items()
    }
    for issue_key, test_iterations in grouped.items():
        logger.debug(f"Grouped {issue_key}: {len(test_iterations)} iteration(s)")
    return grouped


def _parameters_of(
    parameters: Optional[Sequence[Dict[str, str]]], index: int
) -> Dict[str, str]:
    if not parameters or index >= len(parameters):
        return {}
    return dict(parameters[index])
