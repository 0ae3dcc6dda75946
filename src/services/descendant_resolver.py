"""Transitive closure over the department tree."""

import logging
from typing import List, Set

from sqlalchemy.orm import Session

from src.data.department_repository import DepartmentRepository
from src.utils.errors import IntegrityViolationError


logger = logging.getLogger(__name__)


class DescendantResolver:
    """
    Computes the set of departments below a given department.

    Walks the tree breadth-first, one bulk "children of" query per
    level. Nothing is cached: every call reads the current state of
    the session, since the tree may change between calls.
    """

    def __init__(self, session: Session):
        """Initialize resolver with database session."""
        self.session = session
        self.repository = DepartmentRepository(session)

    def descendant_levels(self, department_id: int) -> List[List[int]]:
        """
        Get descendant ids grouped by distance from department_id.

        levels[0] holds the direct children, levels[1] the grandchildren,
        and so on. The department itself is not included.

        Raises:
            IntegrityViolationError: a department was reached twice, which
                means the stored parent references contain a cycle
        """
        visited: Set[int] = {department_id}
        levels: List[List[int]] = []
        frontier = [department_id]

        while frontier:
            next_frontier = []

            for child_id in self.repository.get_children_ids(frontier):
                if child_id in visited:
                    logger.error(
                        "Cycle detected below department %s at department %s",
                        department_id,
                        child_id,
                    )
                    raise IntegrityViolationError(
                        details={
                            "department_id": department_id,
                            "repeated_department_id": child_id,
                        },
                    )

                visited.add(child_id)
                next_frontier.append(child_id)

            if next_frontier:
                levels.append(next_frontier)
            frontier = next_frontier

        return levels

    def descendants_of(self, department_id: int) -> Set[int]:
        """Get ids of every department reachable below department_id."""
        return {
            descendant_id
            for level in self.descendant_levels(department_id)
            for descendant_id in level
        }

    def is_descendant(self, ancestor_id: int, candidate_id: int) -> bool:
        """Check whether candidate_id lies strictly below ancestor_id."""
        return candidate_id in self.descendants_of(ancestor_id)
