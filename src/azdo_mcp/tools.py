"""MCP tool definitions for Azure DevOps.

This module provides the definitive catalog of tools exposed by the server,
grouped by Azure DevOps area. ``server.dispatch`` checks every call against the
tool's ``inputSchema`` before the paired handler in ``handlers.py`` runs.
"""

from typing import Optional

from mcp.types import Tool


def _schema(properties: dict, required: list[str] | None = None) -> dict:
    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return schema


_PROJECT = {"type": "string", "description": "The project name"}
_REPOSITORY_ID = {"type": "string", "description": "The repository ID"}


# ============================================================================
# Core Tools (projects, teams)
# ============================================================================

CORE_TOOLS = [
    Tool(
        name="mcp_ado_core_list_projects",
        description="List all projects in the Azure DevOps organization.",
        inputSchema=_schema({
            "stateFilter": {
                "type": "string",
                "description": "Filter projects by state (all, wellFormed, deleting, new)"
            },
            "top": {
                "type": "integer",
                "description": "Number of projects to return"
            },
        })
    ),
    Tool(
        name="mcp_ado_core_list_project_teams",
        description="List teams within a project.",
        inputSchema=_schema({
            "project": {"type": "string", "description": "The project ID or name"},
            "top": {
                "type": "integer",
                "description": "Maximum number of teams to return"
            },
        }, ["project"])
    ),
]


# ============================================================================
# Work Item Tools
# ============================================================================

WIT_TOOLS = [
    Tool(
        name="mcp_ado_wit_get_work_item",
        description="Get a single work item by ID. "
                    "Returns type, title, state, assignee, priority, dates, description, tags and URL.",
        inputSchema=_schema({
            "id": {"type": "integer", "description": "The work item ID"},
            "project": {
                "type": "string",
                "description": "The project name (optional, work item IDs are globally unique)"
            },
            "expand": {
                "type": "string",
                "description": "Expand options (None, Relations, Fields, Links, All)"
            },
        }, ["id"])
    ),
    Tool(
        name="mcp_ado_wit_get_work_items_batch_by_ids",
        description="Retrieve multiple work items by IDs in batch.",
        inputSchema=_schema({
            "ids": {
                "type": "array",
                "items": {"type": "integer"},
                "description": "Array of work item IDs"
            },
            "project": _PROJECT,
            "fields": {
                "type": "array",
                "items": {"type": "string"},
                "description": "Specific fields to return (e.g., 'System.Title')"
            },
        }, ["ids", "project"])
    ),
    Tool(
        name="mcp_ado_wit_create_work_item",
        description="Create a new work item.",
        inputSchema=_schema({
            "project": _PROJECT,
            "workItemType": {
                "type": "string",
                "description": "Work item type (e.g., 'Task', 'Bug', 'User Story')"
            },
            "title": {"type": "string", "description": "Work item title"},
            "description": {"type": "string", "description": "Work item description (HTML allowed)"},
            "assignedTo": {"type": "string", "description": "User to assign the work item to"},
            "state": {"type": "string", "description": "Work item state"},
            "tags": {"type": "string", "description": "Semicolon-separated tags"},
        }, ["project", "workItemType", "title"])
    ),
    Tool(
        name="mcp_ado_wit_update_work_item",
        description="Update a work item by ID. Only the fields provided are changed; "
                    "at least one of title, description, state, assignedTo or tags is required.",
        inputSchema=_schema({
            "id": {"type": "integer", "description": "The work item ID"},
            "project": _PROJECT,
            "title": {"type": "string", "description": "Updated title"},
            "description": {"type": "string", "description": "Updated description"},
            "state": {"type": "string", "description": "Updated state"},
            "assignedTo": {"type": "string", "description": "Updated assignee"},
            "tags": {"type": "string", "description": "Updated tags (semicolon-separated)"},
        }, ["id", "project"])
    ),
    Tool(
        name="mcp_ado_wit_my_work_items",
        description="Retrieve work items assigned to the current user, most recently changed first.",
        inputSchema=_schema({
            "project": {"type": "string", "description": "Project name to filter by (optional)"},
            "state": {"type": "string", "description": "State filter (e.g., 'Active', 'New')"},
            "type": {"type": "string", "description": "Work item type filter"},
            "top": {
                "type": "integer",
                "description": "Maximum number of items to return (default: 100, max: 200)"
            },
        })
    ),
    Tool(
        name="mcp_ado_wit_add_work_item_comment",
        description="Add a comment to a work item.",
        inputSchema=_schema({
            "project": _PROJECT,
            "workItemId": {"type": "integer", "description": "The work item ID"},
            "comment": {"type": "string", "description": "Comment text"},
        }, ["project", "workItemId", "comment"])
    ),
    Tool(
        name="mcp_ado_wit_list_work_item_comments",
        description="List comments on a work item.",
        inputSchema=_schema({
            "project": _PROJECT,
            "workItemId": {"type": "integer", "description": "The work item ID"},
            "top": {"type": "integer", "description": "Maximum number of comments to return"},
        }, ["project", "workItemId"])
    ),
    Tool(
        name="mcp_ado_wit_get_query_results_by_id",
        description="Execute a saved work item query by ID and get results.",
        inputSchema=_schema({
            "project": _PROJECT,
            "queryId": {"type": "string", "description": "The query ID (GUID)"},
            "top": {"type": "integer", "description": "Maximum number of results (default: 50)"},
        }, ["project", "queryId"])
    ),
]


# ============================================================================
# Repository Tools
# ============================================================================

REPO_TOOLS = [
    Tool(
        name="mcp_ado_repo_list_repos_by_project",
        description="List all repositories in a project.",
        inputSchema=_schema({
            "project": {"type": "string", "description": "The project name or ID"},
        }, ["project"])
    ),
    Tool(
        name="mcp_ado_repo_get_repo_by_name_or_id",
        description="Get repository details by name or ID.",
        inputSchema=_schema({
            "project": _PROJECT,
            "repositoryNameOrId": {"type": "string", "description": "Repository name or ID"},
        }, ["project", "repositoryNameOrId"])
    ),
    Tool(
        name="mcp_ado_repo_list_branches_by_repo",
        description="List all branches in a repository with their latest commit.",
        inputSchema=_schema({
            "repositoryId": _REPOSITORY_ID,
            "project": _PROJECT,
        }, ["repositoryId", "project"])
    ),
    Tool(
        name="mcp_ado_repo_get_branch_by_name",
        description="Get details of a specific branch.",
        inputSchema=_schema({
            "repositoryId": _REPOSITORY_ID,
            "branchName": {
                "type": "string",
                "description": "Branch name (e.g., 'main', 'refs/heads/main')"
            },
            "project": _PROJECT,
        }, ["repositoryId", "branchName", "project"])
    ),
    Tool(
        name="mcp_ado_repo_list_pull_requests_by_repo_or_project",
        description="List pull requests for a repository, or for the whole project when "
                    "repositoryId is omitted.",
        inputSchema=_schema({
            "repositoryId": _REPOSITORY_ID,
            "project": _PROJECT,
            "status": {
                "type": "string",
                "description": "PR status filter (active, completed, abandoned, all). Default: active"
            },
            "targetRefName": {"type": "string", "description": "Target branch filter"},
            "top": {"type": "integer", "description": "Maximum number of PRs to return (default: 50)"},
        }, ["project"])
    ),
    Tool(
        name="mcp_ado_repo_get_pull_request_by_id",
        description="Get details of a specific pull request.",
        inputSchema=_schema({
            "repositoryId": _REPOSITORY_ID,
            "pullRequestId": {"type": "integer", "description": "The pull request ID"},
            "project": _PROJECT,
        }, ["repositoryId", "pullRequestId", "project"])
    ),
    Tool(
        name="mcp_ado_repo_create_pull_request",
        description="Create a new pull request.",
        inputSchema=_schema({
            "repositoryId": _REPOSITORY_ID,
            "project": _PROJECT,
            "sourceRefName": {
                "type": "string",
                "description": "Source branch (e.g., 'refs/heads/feature')"
            },
            "targetRefName": {
                "type": "string",
                "description": "Target branch (e.g., 'refs/heads/main')"
            },
            "title": {"type": "string", "description": "PR title"},
            "description": {"type": "string", "description": "PR description"},
            "isDraft": {"type": "boolean", "description": "Create as draft PR"},
        }, ["repositoryId", "project", "sourceRefName", "targetRefName", "title"])
    ),
]


# ============================================================================
# Pipeline / Build Tools
# ============================================================================

BUILD_TOOLS = [
    Tool(
        name="mcp_ado_pipelines_get_builds",
        description="List builds for a project.",
        inputSchema=_schema({
            "project": _PROJECT,
            "definitions": {
                "type": "array",
                "items": {"type": "integer"},
                "description": "Filter by build definition IDs"
            },
            "top": {"type": "integer", "description": "Maximum number of builds to return"},
            "statusFilter": {
                "type": "string",
                "description": "Status filter (all, cancelling, completed, inProgress, notStarted, postponed)"
            },
            "resultFilter": {
                "type": "string",
                "description": "Result filter (succeeded, partiallySucceeded, failed, canceled)"
            },
        }, ["project"])
    ),
    Tool(
        name="mcp_ado_pipelines_get_build_status",
        description="Get status of a specific build.",
        inputSchema=_schema({
            "project": _PROJECT,
            "buildId": {"type": "integer", "description": "The build ID"},
        }, ["project", "buildId"])
    ),
    Tool(
        name="mcp_ado_pipelines_get_build_definitions",
        description="List build definitions in a project.",
        inputSchema=_schema({
            "project": _PROJECT,
            "name": {"type": "string", "description": "Filter by definition name"},
            "top": {"type": "integer", "description": "Maximum number to return"},
        }, ["project"])
    ),
]


# ============================================================================
# Wiki Tools
# ============================================================================

WIKI_TOOLS = [
    Tool(
        name="mcp_ado_wiki_list_wikis",
        description="List wikis in the organization or in one project.",
        inputSchema=_schema({
            "project": {"type": "string", "description": "Optional project name to filter wikis"},
        })
    ),
    Tool(
        name="mcp_ado_wiki_get_page_content",
        description="Get the markdown content of a wiki page.",
        inputSchema=_schema({
            "wikiIdentifier": {"type": "string", "description": "Wiki ID or name"},
            "project": _PROJECT,
            "path": {"type": "string", "description": "Page path (e.g., '/page-name')"},
        }, ["wikiIdentifier", "project", "path"])
    ),
    Tool(
        name="mcp_ado_wiki_list_pages",
        description="List pages in a wiki (first 100).",
        inputSchema=_schema({
            "wikiIdentifier": {"type": "string", "description": "Wiki ID or name"},
            "project": _PROJECT,
        }, ["wikiIdentifier", "project"])
    ),
]


# ============================================================================
# Search Tools
# ============================================================================

_SEARCH_PAGING = {
    "includeFacets": {
        "type": "boolean",
        "description": "Include facets in the search results (default: false)"
    },
    "skip": {"type": "integer", "description": "Number of results to skip (default: 0)"},
}

SEARCH_TOOLS = [
    Tool(
        name="mcp_ado_search_code",
        description="Search Azure DevOps Repositories for a given search text.",
        inputSchema=_schema({
            "searchText": {
                "type": "string",
                "description": "Keywords to search for in code repositories"
            },
            "project": {"type": "array", "items": {"type": "string"}, "description": "Filter by projects"},
            "repository": {"type": "array", "items": {"type": "string"}, "description": "Filter by repositories"},
            "path": {"type": "array", "items": {"type": "string"}, "description": "Filter by paths"},
            "branch": {"type": "array", "items": {"type": "string"}, "description": "Filter by branches"},
            **_SEARCH_PAGING,
            "top": {"type": "integer", "description": "Maximum number of results to return (default: 5)"},
        }, ["searchText"])
    ),
    Tool(
        name="mcp_ado_search_wiki",
        description="Search Azure DevOps Wiki for a given search text.",
        inputSchema=_schema({
            "searchText": {"type": "string", "description": "Keywords to search for in wiki pages"},
            "project": {"type": "array", "items": {"type": "string"}, "description": "Filter by projects"},
            "wiki": {"type": "array", "items": {"type": "string"}, "description": "Filter by wiki names"},
            **_SEARCH_PAGING,
            "top": {"type": "integer", "description": "Maximum number of results to return (default: 10)"},
        }, ["searchText"])
    ),
    Tool(
        name="mcp_ado_search_workitem",
        description="Search work items whose title contains the given text.",
        inputSchema=_schema({
            "searchText": {"type": "string", "description": "Text to search for"},
            "project": {"type": "string", "description": "Project name filter"},
            "top": {"type": "integer", "description": "Maximum results (default: 50)"},
        }, ["searchText"])
    ),
]


# ============================================================================
# Work (Iteration) Tools
# ============================================================================

WORK_TOOLS = [
    Tool(
        name="mcp_ado_work_list_iterations",
        description="List all iterations in a project (default team).",
        inputSchema=_schema({
            "project": _PROJECT,
        }, ["project"])
    ),
    Tool(
        name="mcp_ado_work_list_team_iterations",
        description="List iterations for a specific team.",
        inputSchema=_schema({
            "project": _PROJECT,
            "team": {"type": "string", "description": "The team name or ID"},
        }, ["project", "team"])
    ),
]


def get_tools() -> list[Tool]:
    """Get the list of all MCP tools for Azure DevOps."""
    return [
        *CORE_TOOLS,
        *WIT_TOOLS,
        *REPO_TOOLS,
        *BUILD_TOOLS,
        *WIKI_TOOLS,
        *SEARCH_TOOLS,
        *WORK_TOOLS,
    ]


def get_tool(name: str) -> Optional[Tool]:
    """Look up one tool definition by name."""
    for tool in get_tools():
        if tool.name == name:
            return tool
    return None
