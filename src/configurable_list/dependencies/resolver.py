"""Join dependency resolution.

Joins declare the joins they depend on. Rendering a query needs the full
transitive closure of the joins required by its columns and qualifiers,
ordered so that every join comes after the joins it depends on.
"""

from collections import defaultdict
from typing import Dict, Iterable, List, Mapping, Optional

from configurable_list.common.exceptions import dependency_cycle_error, unknown_join_error
from configurable_list.definitions.join import Join
from configurable_list.logging import get_logger

logger = get_logger(__name__)


class JoinDependencies:
    """Depth-first topological sort over a join registry.

    Joins are visited in seed order and each join's dependencies in their
    declared order, so the same inputs always produce the same join order.

    Attributes:
        all_joins: Every join known to the list, by name
        required: Seed join names, duplicates ignored
    """

    WHITE, GRAY, BLACK = 0, 1, 2

    def __init__(self, all_joins: Mapping[str, Join], required: Iterable[str]):
        self.all_joins = all_joins
        self.required: List[str] = list(dict.fromkeys(required))

    def tsort(self) -> List[Join]:
        """Return the seed joins and their dependencies in dependency order.

        Raises:
            ListError: UNKNOWN_JOIN if a name is not registered,
                DEPENDENCY_CYCLE if the dependencies form a cycle
        """
        color: Dict[str, int] = defaultdict(lambda: self.WHITE)
        path: List[str] = []
        ordered: List[Join] = []

        def visit(name: str, required_by: Optional[str]) -> None:
            state = color[name]
            if state == self.BLACK:
                return
            if state == self.GRAY:
                raise dependency_cycle_error(path[path.index(name):] + [name])

            join = self.all_joins.get(name)
            if join is None:
                raise unknown_join_error(name, required_by)

            color[name] = self.GRAY
            path.append(name)
            for dependency in join.join_dependencies:
                visit(dependency, name)
            path.pop()
            color[name] = self.BLACK
            ordered.append(join)

        for name in self.required:
            visit(name, None)

        logger.debug(
            "joins.resolved",
            extra={"required": self.required, "ordered": [join.name for join in ordered]},
        )
        return ordered
