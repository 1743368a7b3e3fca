"""Tests for tasktrack.depth: longest-chain depth and the critical path."""

from __future__ import annotations

from tasktrack.depth import DepthCalculator, critical_path_tasks
from tasktrack.tasks.model import Task


def _t(id: str, deps: list[str] | None = None) -> Task:
    return Task(id=id, title=f"Task {id}", dependencies=deps or [])


# ═══════════════════════════════════════════════════════════════════
#  Depth
# ═══════════════════════════════════════════════════════════════════


class TestDepth:
    """Tests for depth() and depth_map()."""

    def test_independent_tasks_have_depth_one(self):
        """No dependencies means depth 1."""
        calc = DepthCalculator([_t("A"), _t("B")])
        assert calc.depth_map() == {"A": 1, "B": 1}

    def test_chain(self):
        """A straight chain of N tasks ends at depth N."""
        calc = DepthCalculator([_t("A"), _t("B", ["A"]), _t("C", ["B"]), _t("D", ["C"])])
        assert calc.depth_map() == {"A": 1, "B": 2, "C": 3, "D": 4}
        assert calc.max_depth() == 4

    def test_longest_branch_wins(self):
        """Depth follows the deepest dependency."""
        calc = DepthCalculator([
            _t("A"),
            _t("B", ["A"]),
            _t("C", ["B"]),
            _t("D", ["A", "C"]),
        ])
        assert calc.depth("D") == 4

    def test_unknown_dependency_contributes_nothing(self):
        """Dangling ids resolve to nothing and leave depth at 1."""
        calc = DepthCalculator([_t("A", ["GHOST", "ALSO-GHOST"])])
        assert calc.depth("A") == 1
        assert calc.depth("GHOST") == 0

    def test_out_of_order_input(self):
        """Dependents listed before their dependencies still resolve."""
        calc = DepthCalculator([_t("C", ["B"]), _t("B", ["A"]), _t("A")])
        assert calc.depth_map() == {"C": 3, "B": 2, "A": 1}

    def test_cycle_is_truncated(self):
        """Re-entering a task on the current chain contributes 0."""
        calc = DepthCalculator([_t("A", ["C"]), _t("B", ["A"]), _t("C", ["B"])])
        # A -> C -> B -> (A on the chain: 0) gives B=1, C=2, A=3
        assert calc.depth_map() == {"A": 3, "B": 1, "C": 2}

    def test_self_cycle(self):
        """A task depending on itself has depth 1."""
        assert DepthCalculator([_t("A", ["A"])]).depth("A") == 1

    def test_depth_at_least_one_on_cyclic_input(self):
        """Every task gets a depth >= 1 even when cycles are tangled."""
        tasks = [
            _t("A", ["B", "D"]),
            _t("B", ["C"]),
            _t("C", ["A", "B"]),
            _t("D", ["D", "GHOST"]),
        ]
        depths = DepthCalculator(tasks).depth_map()
        assert set(depths) == {"A", "B", "C", "D"}
        assert all(d >= 1 for d in depths.values())

    def test_memo_is_per_instance(self):
        """Two calculators over different task sets do not share results."""
        first = DepthCalculator([_t("A"), _t("B", ["A"])])
        second = DepthCalculator([_t("B")])
        assert first.depth("B") == 2
        assert second.depth("B") == 1

    def test_deep_chain(self):
        """Chains longer than the interpreter recursion limit are fine."""
        tasks = [_t("0")] + [_t(str(i), [str(i - 1)]) for i in range(1, 3000)]
        assert DepthCalculator(tasks).max_depth() == 3000

    def test_empty(self):
        """No tasks: max depth 0 and an empty critical path."""
        calc = DepthCalculator([])
        assert calc.max_depth() == 0
        assert calc.critical_path() == set()


# ═══════════════════════════════════════════════════════════════════
#  Critical Path
# ═══════════════════════════════════════════════════════════════════


class TestCriticalPath:
    """Tests for critical_path()."""

    def test_chain_members_are_all_critical(self):
        """An unbranched chain is entirely critical."""
        tasks = [_t("A"), _t("B", ["A"]), _t("C", ["B"])]
        assert critical_path_tasks(tasks) == {"A", "B", "C"}

    def test_short_branch_excluded(self):
        """A side branch shorter than the longest chain is not critical."""
        tasks = [
            _t("A"),
            _t("B", ["A"]),
            _t("C", ["B"]),
            _t("X"),
            _t("Y", ["X"]),
        ]
        assert critical_path_tasks(tasks) == {"A", "B", "C"}

    def test_diamond_includes_both_branches(self):
        """Both sides of a diamond lie on a maximal chain of length 3."""
        tasks = [
            _t("1"),
            _t("2", ["1"]),
            _t("3", ["1"]),
            _t("4", ["2", "3"]),
        ]
        calc = DepthCalculator(tasks)
        assert calc.max_depth() == 3
        assert calc.critical_path() == {"1", "2", "3", "4"}

    def test_disjoint_maximal_chains(self):
        """Every chain reaching the maximum depth is marked."""
        tasks = [_t("A"), _t("B", ["A"]), _t("X"), _t("Y", ["X"]), _t("Z")]
        assert critical_path_tasks(tasks) == {"A", "B", "X", "Y"}

    def test_shallower_dependency_not_marked(self):
        """Only dependencies exactly one level down are followed."""
        tasks = [
            _t("A"),
            _t("B", ["A"]),
            _t("C", ["B", "A"]),
            _t("S"),
            _t("D", ["C", "S"]),
        ]
        assert critical_path_tasks(tasks) == {"A", "B", "C", "D"}

    def test_dangling_dependency_never_critical(self):
        """Unknown ids are never added, even at max depth 1."""
        assert critical_path_tasks([_t("A", ["GHOST"])]) == {"A"}

    def test_cyclic_input_terminates(self):
        """Critical path over a cycle completes and stays within the task set."""
        tasks = [_t("A", ["C"]), _t("B", ["A"]), _t("C", ["B"]), _t("D", ["A"])]
        critical = critical_path_tasks(tasks)
        assert critical <= {"A", "B", "C", "D"}
        assert critical
