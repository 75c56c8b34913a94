"""Static branch tree validation utilities."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from storybranch.domain.blocks import BranchChoiceContent
from storybranch.domain.story import Branch, Story


Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class OptionRef:
    branch_id: str
    block_id: str
    option_id: str
    target_branch_id: str
    target_branch_name: str
    path: str


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_story(story: Story) -> list[Issue]:
    return validate_story_graph(story.branches, story.root_branch_id)


def validate_story_graph(
    branches: Mapping[str, Branch] | Sequence[tuple[str, Branch]],
    root_branch_id: str,
) -> list[Issue]:
    issues: list[Issue] = []
    branch_map, duplicate_ids = _coerce_branches(branches)
    for branch_id in duplicate_ids:
        issues.append(
            Issue(
                severity="ERROR",
                code="DUPLICATE_BRANCH_ID",
                message="Duplicate branch id detected.",
                context={"branch_id": branch_id},
            )
        )

    _validate_root(branch_map, root_branch_id, issues)
    _validate_parents(branch_map, root_branch_id, issues)
    option_refs = _collect_options(branch_map, issues)
    for ref in option_refs:
        _validate_option_target(ref, branch_map, issues)
    _validate_reachability(branch_map, root_branch_id, option_refs, issues)
    return issues


def _coerce_branches(
    branches: Mapping[str, Branch] | Sequence[tuple[str, Branch]],
) -> tuple[dict[str, Branch], list[str]]:
    if isinstance(branches, Mapping):
        return dict(branches), []
    branch_map: dict[str, Branch] = {}
    duplicates: list[str] = []
    for branch_id, branch in branches:
        if branch_id in branch_map:
            duplicates.append(branch_id)
            continue
        branch_map[branch_id] = branch
    return branch_map, duplicates


def _validate_root(branch_map: Mapping[str, Branch], root_branch_id: str, issues: list[Issue]) -> None:
    root = branch_map.get(root_branch_id)
    if root is None:
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_ROOT",
                message="Root branch id does not resolve to a branch.",
                context={"referenced_id": root_branch_id},
            )
        )
        return
    if root.parent_id is not None:
        issues.append(
            Issue(
                severity="ERROR",
                code="ROOT_HAS_PARENT",
                message="Root branch must not have a parent.",
                context={"branch_id": root.id, "parent_id": root.parent_id},
            )
        )


def _validate_parents(branch_map: Mapping[str, Branch], root_branch_id: str, issues: list[Issue]) -> None:
    for branch in branch_map.values():
        if branch.parent_id is None:
            if branch.id != root_branch_id:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="EXTRA_ROOT",
                        message="Non-root branch has no parent.",
                        context={"branch_id": branch.id},
                    )
                )
            continue
        if branch.parent_id not in branch_map:
            issues.append(
                Issue(
                    severity="ERROR",
                    code="DANGLING_PARENT",
                    message="Branch parent does not exist.",
                    context={"branch_id": branch.id, "referenced_id": branch.parent_id},
                )
            )

    reported: set[frozenset[str]] = set()
    for start_id in sorted(branch_map):
        chain: list[str] = []
        current: str | None = start_id
        while current is not None and current in branch_map and current not in chain:
            chain.append(current)
            current = branch_map[current].parent_id
        if current is None or current not in chain:
            continue
        cycle = chain[chain.index(current) :]
        key = frozenset(cycle)
        if key in reported:
            continue
        reported.add(key)
        cycle_path = " -> ".join(cycle + [cycle[0]])
        issues.append(
            Issue(
                severity="ERROR",
                code="PARENT_CYCLE",
                message="Parent pointers form a cycle.",
                context={"cycle": cycle_path},
            )
        )


def _collect_options(branch_map: Mapping[str, Branch], issues: list[Issue]) -> list[OptionRef]:
    refs: list[OptionRef] = []
    for branch in branch_map.values():
        seen_blocks: set[str] = set()
        for block_index, block in enumerate(branch.blocks):
            if block.id in seen_blocks:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="DUPLICATE_BLOCK_ID",
                        message="Duplicate block id within branch.",
                        context={"branch_id": branch.id, "block_id": block.id},
                    )
                )
            seen_blocks.add(block.id)
            if not isinstance(block.content, BranchChoiceContent):
                continue
            seen_options: set[str] = set()
            for option_index, option in enumerate(block.content.options):
                if option.id in seen_options:
                    issues.append(
                        Issue(
                            severity="ERROR",
                            code="DUPLICATE_OPTION_ID",
                            message="Duplicate option id within block.",
                            context={"branch_id": branch.id, "block_id": block.id, "option_id": option.id},
                        )
                    )
                seen_options.add(option.id)
                refs.append(
                    OptionRef(
                        branch_id=branch.id,
                        block_id=block.id,
                        option_id=option.id,
                        target_branch_id=option.target_branch_id,
                        target_branch_name=option.target_branch_name,
                        path=f"blocks[{block_index}].options[{option_index}]",
                    )
                )
    return refs


def _validate_option_target(ref: OptionRef, branch_map: Mapping[str, Branch], issues: list[Issue]) -> None:
    context = {"branch_id": ref.branch_id, "field_path": ref.path}
    if not ref.target_branch_id:
        issues.append(
            Issue(
                severity="WARN",
                code="UNRESOLVED_OPTION",
                message="Option has no target branch and will be inert.",
                context=context,
            )
        )
        return
    if ref.target_branch_id == ref.branch_id:
        issues.append(
            Issue(
                severity="ERROR",
                code="SELF_TARGET",
                message="Option targets its own containing branch.",
                context={**context, "referenced_id": ref.target_branch_id},
            )
        )
        return
    target = branch_map.get(ref.target_branch_id)
    if target is None:
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_TARGET_BRANCH",
                message="Option references missing branch.",
                context={**context, "referenced_id": ref.target_branch_id},
            )
        )
        return
    if target.parent_id != ref.branch_id:
        issues.append(
            Issue(
                severity="WARN",
                code="TARGET_PARENT_MISMATCH",
                message="Option target is not a child of the option's branch.",
                context={**context, "referenced_id": target.id},
            )
        )
    if ref.target_branch_name != target.name:
        issues.append(
            Issue(
                severity="WARN",
                code="STALE_TARGET_NAME",
                message="Cached target branch name differs from the branch name.",
                context={**context, "referenced_id": target.id},
            )
        )


def _validate_reachability(
    branch_map: Mapping[str, Branch],
    root_branch_id: str,
    option_refs: Sequence[OptionRef],
    issues: list[Issue],
) -> None:
    targets_by_branch: dict[str, list[str]] = {}
    targeted: set[str] = set()
    for ref in option_refs:
        if ref.target_branch_id in branch_map:
            targets_by_branch.setdefault(ref.branch_id, []).append(ref.target_branch_id)
            targeted.add(ref.target_branch_id)

    reachable: set[str] = set()
    stack: list[str] = [root_branch_id] if root_branch_id in branch_map else []
    while stack:
        branch_id = stack.pop()
        if branch_id in reachable:
            continue
        reachable.add(branch_id)
        stack.extend(targets_by_branch.get(branch_id, []))

    for branch_id in sorted(set(branch_map) - {root_branch_id}):
        if branch_id not in targeted:
            issues.append(
                Issue(
                    severity="WARN",
                    code="ORPHANED_BRANCH",
                    message="No option leads to this branch.",
                    context={"branch_id": branch_id},
                )
            )
        if branch_id not in reachable:
            issues.append(
                Issue(
                    severity="WARN",
                    code="UNREACHABLE_BRANCH",
                    message="Branch is unreachable from the root branch.",
                    context={"branch_id": branch_id},
                )
            )
