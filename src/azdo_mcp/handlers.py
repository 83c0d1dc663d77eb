"""Tool handlers for the Azure DevOps MCP server.

All handlers follow a consistent pattern:
- Accept: arguments dict and an ``AdoConnection`` created for this call
- Validate required arguments before touching the network
- Issue remote calls through the area clients
- Return: ``CallToolResult`` with markdown text, or an error-flagged result
  carrying the exception message

``HANDLERS`` at the bottom maps tool names to handler functions.
"""
import logging
from typing import Any, Awaitable, Callable, Optional

from mcp.types import CallToolResult

from .connection import AdoConnection
from .formatters import (
    display_name,
    escape_wiql_string,
    format_date,
    format_fields,
    format_found,
    format_iteration,
    format_section,
    format_table,
    format_work_item_fields,
    format_work_item_table,
    sanitize_table_cell,
)
from .validation import (
    create_error_response,
    create_text_response,
    extract_array_param,
    validate_at_least_one_param,
    validate_required_params,
)

logger = logging.getLogger("azdo-mcp.handlers")

Handler = Callable[[Optional[dict], AdoConnection], Awaitable[CallToolResult]]

SEARCH_API_VERSION = "7.1-preview.1"

MY_WORK_ITEMS_DEFAULT_TOP = 100
MY_WORK_ITEMS_MAX_TOP = 200
QUERY_RESULTS_DEFAULT_TOP = 50


def _error(action: str, exc: Exception) -> CallToolResult:
    logger.error(f"Error {action}: {type(exc).__name__}: {exc}")
    return create_error_response(f"Error {action}: {exc}")


async def _query_then_hydrate(
    connection: AdoConnection,
    query_result: dict,
    top: int,
) -> tuple[int, list[dict]]:
    """Fetch full records for the first ``top`` ids of a WIQL result.

    Returns the total number of matches and the hydrated (clipped) records.
    """
    refs = query_result.get("workItems") or []
    if not refs:
        return 0, []
    ids = [ref["id"] for ref in refs[:top]]
    work_items = await connection.get_wit_api().get_work_items(ids)
    return len(refs), work_items


# ============================================================================
# Core Handlers (projects, teams)
# ============================================================================

async def handle_list_projects(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List all projects in the organization."""
    arguments = arguments or {}
    try:
        projects = await connection.get_core_api().get_projects(
            arguments.get("stateFilter"), arguments.get("top")
        )
        logger.info(f"Successfully listed {len(projects)} projects")

        output = format_found("Azure DevOps Projects", len(projects), "projects")
        for project in projects:
            pairs = [
                ("ID", project.get("id")),
                ("State", project.get("state")),
                ("Visibility", project.get("visibility")),
            ]
            if project.get("description"):
                pairs.append(("Description", project["description"]))
            pairs.append(("URL", project.get("url")))
            output += format_section(str(project.get("name")), pairs)

        return create_text_response(output)
    except Exception as e:
        return _error("listing projects", e)


async def handle_list_project_teams(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List teams within a project."""
    validation = validate_required_params(arguments, ["project"])
    if validation:
        return validation

    try:
        teams = await connection.get_core_api().get_teams(arguments["project"], arguments.get("top"))
        logger.info(f"Successfully listed {len(teams)} teams in {arguments['project']}")

        output = format_found(f"Teams in {arguments['project']}", len(teams), "teams")
        for team in teams:
            pairs = [("ID", team.get("id"))]
            if team.get("description"):
                pairs.append(("Description", team["description"]))
            pairs.append(("URL", team.get("url")))
            output += format_section(str(team.get("name")), pairs)

        return create_text_response(output)
    except Exception as e:
        return _error("listing teams", e)


# ============================================================================
# Work Item Handlers
# ============================================================================

async def handle_get_work_item(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Get a single work item by ID."""
    validation = validate_required_params(arguments, ["id"])
    if validation:
        return validation

    try:
        work_item = await connection.get_wit_api().get_work_item(
            arguments["id"], arguments.get("expand")
        )
        logger.info(f"Successfully retrieved work item {arguments['id']}")
        return create_text_response(format_work_item_fields(work_item))
    except Exception as e:
        return _error("getting work item", e)


async def handle_get_work_items_batch(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Retrieve multiple work items by IDs."""
    validation = validate_required_params(arguments, ["ids", "project"])
    if validation:
        return validation

    try:
        work_items = await connection.get_wit_api().get_work_items(
            arguments["ids"], arguments.get("fields")
        )
        logger.info(f"Successfully retrieved {len(work_items)} work items")

        output = format_found("Work Items", len(work_items), "work items")
        output += format_work_item_table(work_items, title_length=50)
        return create_text_response(output)
    except Exception as e:
        return _error("getting work items", e)


def _field_patches(arguments: dict, op: str) -> list[dict]:
    """Build a patch document from the optional work item field arguments."""
    field_map = [
        ("title", "System.Title"),
        ("description", "System.Description"),
        ("assignedTo", "System.AssignedTo"),
        ("state", "System.State"),
        ("tags", "System.Tags"),
    ]
    return [
        {"op": op, "path": f"/fields/{field}", "value": arguments[arg]}
        for arg, field in field_map
        if arguments.get(arg)
    ]


async def handle_create_work_item(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Create a new work item."""
    validation = validate_required_params(arguments, ["project", "workItemType", "title"])
    if validation:
        return validation

    try:
        document = _field_patches(arguments, "add")
        work_item = await connection.get_wit_api().create_work_item(
            document, arguments["project"], arguments["workItemType"]
        )
        logger.info(f"Successfully created work item {work_item.get('id')}")

        url = (work_item.get("_links") or {}).get("html", {}).get("href") or "N/A"
        output = "# Work Item Created\n\n" + format_fields([
            ("ID", work_item.get("id")),
            ("Type", arguments["workItemType"]),
            ("Title", arguments["title"]),
            ("URL", url),
        ])
        return create_text_response(output.rstrip("\n"))
    except Exception as e:
        return _error("creating work item", e)


async def handle_update_work_item(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Update fields of a work item."""
    validation = validate_required_params(arguments, ["id", "project"])
    if validation:
        return validation
    validation = validate_at_least_one_param(
        arguments, ["title", "description", "state", "assignedTo", "tags"]
    )
    if validation:
        return validation

    try:
        document = _field_patches(arguments, "replace")
        work_item = await connection.get_wit_api().update_work_item(
            document, arguments["id"], arguments["project"]
        )
        logger.info(f"Successfully updated work item {arguments['id']}")
        return create_text_response(
            f"# Work Item Updated\n\n**ID:** {work_item.get('id')}\n**Updated successfully**"
        )
    except Exception as e:
        return _error("updating work item", e)


async def handle_my_work_items(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List work items assigned to the authenticated user."""
    arguments = arguments or {}
    try:
        top = min(arguments.get("top") or MY_WORK_ITEMS_DEFAULT_TOP, MY_WORK_ITEMS_MAX_TOP)

        query = (
            "SELECT [System.Id], [System.Title], [System.State], [System.WorkItemType], "
            "[System.AssignedTo], [System.ChangedDate] FROM WorkItems "
            "WHERE [System.AssignedTo] = @Me"
        )
        if arguments.get("project"):
            query += f" AND [System.TeamProject] = '{escape_wiql_string(arguments['project'])}'"
        if arguments.get("state"):
            query += f" AND [System.State] = '{escape_wiql_string(arguments['state'])}'"
        if arguments.get("type"):
            query += f" AND [System.WorkItemType] = '{escape_wiql_string(arguments['type'])}'"
        query += " ORDER BY [System.ChangedDate] DESC"

        query_result = await connection.get_wit_api().query_by_wiql(query)
        total, work_items = await _query_then_hydrate(connection, query_result, top)
        if not total:
            return create_text_response("No work items found")
        logger.info(f"Found {total} work items assigned to current user")

        rows = []
        for wi in work_items:
            f = wi.get("fields") or {}
            rows.append([
                wi.get("id"),
                f.get("System.WorkItemType") or "",
                sanitize_table_cell(f.get("System.Title"), 40),
                f.get("System.State") or "",
                format_date(f.get("System.ChangedDate")),
            ])

        output = format_found("My Work Items", total, "work items", f" (showing {len(work_items)})")
        output += format_table(["ID", "Type", "Title", "State", "Changed Date"], rows)
        return create_text_response(output)
    except Exception as e:
        return _error("getting my work items", e)


async def handle_add_work_item_comment(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Add a comment to a work item."""
    validation = validate_required_params(arguments, ["project", "workItemId", "comment"])
    if validation:
        return validation

    try:
        await connection.get_wit_api().add_comment(
            arguments["comment"], arguments["project"], arguments["workItemId"]
        )
        logger.info(f"Successfully added comment to work item {arguments['workItemId']}")
        return create_text_response(f"Comment added to work item {arguments['workItemId']}")
    except Exception as e:
        return _error("adding comment", e)


async def handle_list_work_item_comments(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List comments on a work item."""
    validation = validate_required_params(arguments, ["project", "workItemId"])
    if validation:
        return validation

    try:
        result = await connection.get_wit_api().get_comments(
            arguments["project"], arguments["workItemId"], arguments.get("top")
        )
        comments = result.get("comments") or []

        output = f"# Comments for Work Item {arguments['workItemId']}\n\n"
        if not comments:
            output += "No comments found.\n"
        for comment in comments:
            author = display_name(comment.get("createdBy"), "Unknown")
            output += f"## {author} - {format_date(comment.get('createdDate'))}\n"
            output += f"{comment.get('text')}\n\n"

        return create_text_response(output)
    except Exception as e:
        return _error("listing comments", e)


async def handle_get_query_results_by_id(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Run a saved query and show the matching work items."""
    validation = validate_required_params(arguments, ["project", "queryId"])
    if validation:
        return validation

    try:
        query_result = await connection.get_wit_api().query_by_id(
            arguments["queryId"], arguments["project"]
        )
        top = arguments.get("top") or QUERY_RESULTS_DEFAULT_TOP
        total, work_items = await _query_then_hydrate(connection, query_result, top)
        if not total:
            return create_text_response("No work items found")

        output = format_found("Query Results", total, "work items", f" (showing {len(work_items)})")
        output += format_work_item_table(work_items, title_length=50)
        return create_text_response(output)
    except Exception as e:
        return _error("getting query results", e)


# ============================================================================
# Repository Handlers
# ============================================================================

async def handle_list_repos_by_project(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List all repositories in a project."""
    validation = validate_required_params(arguments, ["project"])
    if validation:
        return validation

    try:
        repos = await connection.get_git_api().get_repositories(arguments["project"])
        logger.info(f"Successfully listed {len(repos)} repositories in {arguments['project']}")

        output = format_found(f"Repositories in {arguments['project']}", len(repos), "repositories")
        for repo in repos:
            output += format_section(str(repo.get("name")), [
                ("ID", repo.get("id")),
                ("Default Branch", repo.get("defaultBranch") or "N/A"),
                ("URL", repo.get("remoteUrl")),
                ("Web URL", repo.get("webUrl")),
            ])

        return create_text_response(output)
    except Exception as e:
        return _error("listing repositories", e)


async def handle_get_repo_by_name_or_id(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Get repository details by name or ID."""
    validation = validate_required_params(arguments, ["project", "repositoryNameOrId"])
    if validation:
        return validation

    try:
        repo = await connection.get_git_api().get_repository(
            arguments["repositoryNameOrId"], arguments["project"]
        )

        output = f"# Repository: {repo.get('name')}\n\n" + format_fields([
            ("ID", repo.get("id")),
            ("Default Branch", repo.get("defaultBranch") or "N/A"),
            ("Size", f"{repo.get('size')} bytes"),
            ("Remote URL", repo.get("remoteUrl")),
            ("Web URL", repo.get("webUrl")),
            ("Project", (repo.get("project") or {}).get("name")),
        ], bullet=True)
        return create_text_response(output)
    except Exception as e:
        return _error("getting repository", e)


async def handle_list_branches_by_repo(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List branches in a repository with their head commit."""
    validation = validate_required_params(arguments, ["repositoryId", "project"])
    if validation:
        return validation

    try:
        branches = await connection.get_git_api().get_branches(
            arguments["repositoryId"], arguments["project"]
        )

        output = format_found("Branches", len(branches), "branches")
        for branch in branches:
            output += f"- **{branch.get('name')}**\n"
            commit = branch.get("commit")
            if commit:
                author = commit.get("author") or {}
                output += f"  - Commit: {(commit.get('commitId') or '')[:8]}\n"
                output += f"  - Author: {author.get('name')}\n"
                output += f"  - Date: {format_date(author.get('date'))}\n"

        return create_text_response(output)
    except Exception as e:
        return _error("listing branches", e)


async def handle_get_branch_by_name(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Get the head commit of one branch."""
    validation = validate_required_params(arguments, ["repositoryId", "branchName", "project"])
    if validation:
        return validation

    try:
        name = arguments["branchName"].removeprefix("refs/heads/")
        branch = await connection.get_git_api().get_branch(
            arguments["repositoryId"], name, arguments["project"]
        )

        output = f"# Branch: {branch.get('name')}\n\n"
        commit = branch.get("commit")
        if commit:
            author = commit.get("author") or {}
            output += format_fields([
                ("Commit", commit.get("commitId")),
                ("Author", author.get("name")),
                ("Email", author.get("email")),
                ("Date", format_date(author.get("date"))),
                ("Comment", commit.get("comment")),
            ])

        return create_text_response(output)
    except Exception as e:
        return _error("getting branch", e)


async def handle_list_pull_requests(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List pull requests in a repository or across a project."""
    validation = validate_required_params(arguments, ["project"])
    if validation:
        return validation

    try:
        search_criteria = {"status": arguments.get("status") or "active"}
        if arguments.get("targetRefName"):
            search_criteria["targetRefName"] = arguments["targetRefName"]

        prs = await connection.get_git_api().get_pull_requests(
            arguments.get("repositoryId"),
            search_criteria,
            arguments["project"],
            skip=0,
            top=arguments.get("top") or 50,
        )
        logger.info(f"Successfully listed {len(prs)} pull requests")

        rows = [
            [
                pr.get("pullRequestId"),
                sanitize_table_cell(pr.get("title"), 50),
                pr.get("status"),
                display_name(pr.get("createdBy"), "Unknown"),
                format_date(pr.get("creationDate")),
            ]
            for pr in prs
        ]
        output = format_found("Pull Requests", len(prs), "pull requests")
        output += format_table(["ID", "Title", "Status", "Created By", "Created Date"], rows)
        return create_text_response(output)
    except Exception as e:
        return _error("listing pull requests", e)


async def handle_get_pull_request_by_id(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Get details of one pull request."""
    validation = validate_required_params(arguments, ["repositoryId", "pullRequestId", "project"])
    if validation:
        return validation

    try:
        pr = await connection.get_git_api().get_pull_request(
            arguments["repositoryId"], arguments["pullRequestId"], arguments["project"]
        )

        output = f"# Pull Request {pr.get('pullRequestId')}\n\n" + format_fields([
            ("Title", pr.get("title")),
            ("Status", pr.get("status")),
            ("Created By", display_name(pr.get("createdBy"))),
            ("Created Date", format_date(pr.get("creationDate"))),
            ("Source Branch", pr.get("sourceRefName")),
            ("Target Branch", pr.get("targetRefName")),
            ("URL", pr.get("url")),
        ])
        output += f"\n## Description\n{pr.get('description') or 'No description'}\n"
        return create_text_response(output)
    except Exception as e:
        return _error("getting pull request", e)


async def handle_create_pull_request(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Create a new pull request."""
    validation = validate_required_params(
        arguments, ["repositoryId", "project", "sourceRefName", "targetRefName", "title"]
    )
    if validation:
        return validation

    try:
        pr = await connection.get_git_api().create_pull_request(
            {
                "title": arguments["title"],
                "description": arguments.get("description"),
                "sourceRefName": arguments["sourceRefName"],
                "targetRefName": arguments["targetRefName"],
                "isDraft": arguments.get("isDraft"),
            },
            arguments["repositoryId"],
            arguments["project"],
        )
        logger.info(f"Successfully created pull request {pr.get('pullRequestId')}")

        return create_text_response(
            f"# Pull Request Created\n\n**ID:** {pr.get('pullRequestId')}\n"
            f"**Title:** {pr.get('title')}\n**URL:** {pr.get('url')}"
        )
    except Exception as e:
        return _error("creating pull request", e)


# ============================================================================
# Build Handlers
# ============================================================================

async def handle_get_builds(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List builds for a project."""
    validation = validate_required_params(arguments, ["project"])
    if validation:
        return validation

    try:
        builds = await connection.get_build_api().get_builds(
            arguments["project"],
            definitions=arguments.get("definitions"),
            status_filter=arguments.get("statusFilter"),
            result_filter=arguments.get("resultFilter"),
            top=arguments.get("top"),
        )

        rows = [
            [
                build.get("id"),
                (build.get("definition") or {}).get("name"),
                build.get("status"),
                build.get("result") or "N/A",
                format_date(build.get("startTime")),
            ]
            for build in builds
        ]
        output = format_found("Builds", len(builds), "builds")
        output += format_table(["ID", "Definition", "Status", "Result", "Started"], rows)
        return create_text_response(output)
    except Exception as e:
        return _error("getting builds", e)


async def handle_get_build_status(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Get status of one build."""
    validation = validate_required_params(arguments, ["project", "buildId"])
    if validation:
        return validation

    try:
        build = await connection.get_build_api().get_build(arguments["project"], arguments["buildId"])

        output = f"# Build {build.get('id')}\n\n" + format_fields([
            ("Definition", (build.get("definition") or {}).get("name")),
            ("Status", build.get("status")),
            ("Result", build.get("result") or "N/A"),
            ("Source Branch", build.get("sourceBranch")),
            ("Started", format_date(build.get("startTime"))),
            ("Finished", format_date(build.get("finishTime"))),
            ("Requested By", display_name(build.get("requestedBy"))),
            ("Requested For", display_name(build.get("requestedFor"))),
        ])
        return create_text_response(output)
    except Exception as e:
        return _error("getting build status", e)


async def handle_get_build_definitions(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List build definitions in a project."""
    validation = validate_required_params(arguments, ["project"])
    if validation:
        return validation

    try:
        definitions = await connection.get_build_api().get_definitions(
            arguments["project"], arguments.get("name"), arguments.get("top")
        )

        output = format_found("Build Definitions", len(definitions), "definitions")
        for definition in definitions:
            output += format_section(str(definition.get("name")), [
                ("ID", definition.get("id")),
                ("Path", definition.get("path")),
                ("Type", definition.get("type")),
                ("Queue Status", definition.get("queueStatus")),
            ])
        return create_text_response(output)
    except Exception as e:
        return _error("getting build definitions", e)


# ============================================================================
# Wiki Handlers
# ============================================================================

async def handle_list_wikis(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List wikis in the organization or one project."""
    arguments = arguments or {}
    try:
        wikis = await connection.get_wiki_api().get_all_wikis(arguments.get("project"))

        output = format_found("Wikis", len(wikis), "wikis")
        for wiki in wikis:
            pairs = [("ID", wiki.get("id")), ("Type", wiki.get("type"))]
            if wiki.get("projectId"):
                pairs.append(("Project ID", wiki["projectId"]))
            pairs.append(("URL", wiki.get("url")))
            output += format_section(str(wiki.get("name")), pairs)
        return create_text_response(output)
    except Exception as e:
        return _error("listing wikis", e)


async def handle_get_page_content(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Return the raw markdown of a wiki page."""
    validation = validate_required_params(arguments, ["wikiIdentifier", "project", "path"])
    if validation:
        return validation

    try:
        content = await connection.get_wiki_api().get_page_text(
            arguments["project"], arguments["wikiIdentifier"], arguments["path"]
        )
        return create_text_response(content)
    except Exception as e:
        return _error("getting page content", e)


async def handle_list_pages(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List the first 100 pages of a wiki."""
    validation = validate_required_params(arguments, ["wikiIdentifier", "project"])
    if validation:
        return validation

    try:
        pages = await connection.get_wiki_api().get_pages_batch(
            arguments["project"], arguments["wikiIdentifier"], top=100
        )

        output = format_found("Wiki Pages", len(pages), "pages")
        for page in pages:
            output += f"- **{page.get('path')}** (ID: {page.get('id')})\n"
        return create_text_response(output)
    except Exception as e:
        return _error("listing pages", e)


# ============================================================================
# Search Handlers
# ============================================================================

async def _post_search(
    connection: AdoConnection,
    kind: str,
    endpoint: str,
    body: dict,
) -> tuple[Optional[dict], Optional[CallToolResult]]:
    """POST to a search endpoint; non-2xx answers become an error response."""
    response = await connection.request(
        "POST", f"_apis/search/{endpoint}", json=body, api_version=SEARCH_API_VERSION
    )
    if not response.is_success:
        return None, create_error_response(
            f"Azure DevOps {kind} Search API error: {response.status_code} {response.reason_phrase}\n"
            f"URL: {response.request.url}\n"
            f"Error: {response.text}"
        )
    return response.json(), None


def _search_body(arguments: dict, default_top: int, filter_names: dict[str, str]) -> dict:
    body: dict[str, Any] = {
        "searchText": arguments["searchText"],
        "includeFacets": arguments.get("includeFacets") or False,
        "$skip": arguments.get("skip") or 0,
        "$top": arguments.get("top") or default_top,
    }
    filters = {}
    for arg, filter_name in filter_names.items():
        values = extract_array_param(arguments, arg)
        if values:
            filters[filter_name] = values
    if filters:
        body["filters"] = filters
    return body


def _search_preamble(title: str, arguments: dict, result: dict) -> tuple[str, list[dict]]:
    output = f"# {title}\n\nSearch query: \"{arguments['searchText']}\"\n\n"
    if not result.get("count"):
        return output + "No results found.\n", []
    output += f"Found {result['count']} results:\n\n"
    return output, result.get("results") or []


async def handle_search_code(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Full-text code search across repositories."""
    validation = validate_required_params(arguments, ["searchText"])
    if validation:
        return validation

    try:
        body = _search_body(arguments, 5, {
            "project": "Project",
            "repository": "Repository",
            "path": "Path",
            "branch": "Branch",
        })
        result, error = await _post_search(connection, "Code", "codesearchresults", body)
        if error:
            return error

        output, hits = _search_preamble("Code Search Results", arguments, result)
        for index, hit in enumerate(hits, start=1):
            output += f"## Result {index}\n" + format_fields([
                ("File", hit.get("path") or "N/A"),
                ("Repository", (hit.get("repository") or {}).get("name") or "N/A"),
                ("Project", (hit.get("project") or {}).get("name") or "N/A"),
            ])
            if hit.get("contentId"):
                output += f"**Content ID:** {hit['contentId']}\n"
            output += "\n"
        return create_text_response(output)
    except Exception as e:
        return _error("searching code", e)


async def handle_search_wiki(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Full-text search across wiki pages."""
    validation = validate_required_params(arguments, ["searchText"])
    if validation:
        return validation

    try:
        body = _search_body(arguments, 10, {"project": "Project", "wiki": "Wiki"})
        result, error = await _post_search(connection, "Wiki", "wikisearchresults", body)
        if error:
            return error

        output, hits = _search_preamble("Wiki Search Results", arguments, result)
        for index, hit in enumerate(hits, start=1):
            output += f"## Result {index}\n" + format_fields([
                ("Title", hit.get("fileName") or "N/A"),
                ("Path", hit.get("path") or "N/A"),
                ("Wiki", (hit.get("wiki") or {}).get("name") or "N/A"),
                ("Project", (hit.get("project") or {}).get("name") or "N/A"),
            ])
            highlights = hit.get("hitHighlights")
            if highlights:
                if isinstance(highlights, list):
                    highlights = ", ".join(str(h) for h in highlights)
                output += f"**Preview:** {highlights}\n"
            output += "\n"
        return create_text_response(output)
    except Exception as e:
        return _error("searching wiki", e)


async def handle_search_workitem(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """Find work items whose title contains the search text."""
    validation = validate_required_params(arguments, ["searchText"])
    if validation:
        return validation

    try:
        query = (
            "SELECT [System.Id], [System.Title], [System.State], [System.WorkItemType] "
            "FROM WorkItems WHERE [System.Title] CONTAINS "
            f"'{escape_wiql_string(arguments['searchText'])}'"
        )
        if arguments.get("project"):
            query += f" AND [System.TeamProject] = '{escape_wiql_string(arguments['project'])}'"

        query_result = await connection.get_wit_api().query_by_wiql(query)
        top = arguments.get("top") or QUERY_RESULTS_DEFAULT_TOP
        total, work_items = await _query_then_hydrate(connection, query_result, top)
        if not total:
            return create_text_response("No work items found")

        rows = []
        for wi in work_items:
            f = wi.get("fields") or {}
            rows.append([
                wi.get("id"),
                f.get("System.WorkItemType") or "",
                sanitize_table_cell(f.get("System.Title"), 60),
                f.get("System.State") or "",
            ])
        output = format_found("Search Results", total, "work items", f" (showing {len(work_items)})")
        output += format_table(["ID", "Type", "Title", "State"], rows)
        return create_text_response(output)
    except Exception as e:
        return _error("searching work items", e)


# ============================================================================
# Work (Iteration) Handlers
# ============================================================================

async def handle_list_iterations(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List iterations of the project's default team."""
    validation = validate_required_params(arguments, ["project"])
    if validation:
        return validation

    try:
        iterations = await connection.get_work_api().get_team_iterations(arguments["project"])

        output = format_found("Iterations", len(iterations), "iterations")
        output += "".join(format_iteration(iteration) for iteration in iterations)
        return create_text_response(output)
    except Exception as e:
        return _error("listing iterations", e)


async def handle_list_team_iterations(arguments: Optional[dict], connection: AdoConnection) -> CallToolResult:
    """List iterations of one team."""
    validation = validate_required_params(arguments, ["project", "team"])
    if validation:
        return validation

    try:
        iterations = await connection.get_work_api().get_team_iterations(
            arguments["project"], arguments["team"]
        )

        output = format_found(
            "Team Iterations", len(iterations), "iterations", f" for team {arguments['team']}"
        )
        output += "".join(format_iteration(iteration, include_time_frame=True) for iteration in iterations)
        return create_text_response(output)
    except Exception as e:
        return _error("listing team iterations", e)


# ============================================================================
# Registry
# ============================================================================

HANDLERS: dict[str, Handler] = {
    # Core handlers
    "mcp_ado_core_list_projects": handle_list_projects,
    "mcp_ado_core_list_project_teams": handle_list_project_teams,
    # Work item handlers
    "mcp_ado_wit_get_work_item": handle_get_work_item,
    "mcp_ado_wit_get_work_items_batch_by_ids": handle_get_work_items_batch,
    "mcp_ado_wit_create_work_item": handle_create_work_item,
    "mcp_ado_wit_update_work_item": handle_update_work_item,
    "mcp_ado_wit_my_work_items": handle_my_work_items,
    "mcp_ado_wit_add_work_item_comment": handle_add_work_item_comment,
    "mcp_ado_wit_list_work_item_comments": handle_list_work_item_comments,
    "mcp_ado_wit_get_query_results_by_id": handle_get_query_results_by_id,
    # Repository handlers
    "mcp_ado_repo_list_repos_by_project": handle_list_repos_by_project,
    "mcp_ado_repo_get_repo_by_name_or_id": handle_get_repo_by_name_or_id,
    "mcp_ado_repo_list_branches_by_repo": handle_list_branches_by_repo,
    "mcp_ado_repo_get_branch_by_name": handle_get_branch_by_name,
    "mcp_ado_repo_list_pull_requests_by_repo_or_project": handle_list_pull_requests,
    "mcp_ado_repo_get_pull_request_by_id": handle_get_pull_request_by_id,
    "mcp_ado_repo_create_pull_request": handle_create_pull_request,
    # Build handlers
    "mcp_ado_pipelines_get_builds": handle_get_builds,
    "mcp_ado_pipelines_get_build_status": handle_get_build_status,
    "mcp_ado_pipelines_get_build_definitions": handle_get_build_definitions,
    # Wiki handlers
    "mcp_ado_wiki_list_wikis": handle_list_wikis,
    "mcp_ado_wiki_get_page_content": handle_get_page_content,
    "mcp_ado_wiki_list_pages": handle_list_pages,
    # Search handlers
    "mcp_ado_search_code": handle_search_code,
    "mcp_ado_search_wiki": handle_search_wiki,
    "mcp_ado_search_workitem": handle_search_workitem,
    # Work handlers
    "mcp_ado_work_list_iterations": handle_list_iterations,
    "mcp_ado_work_list_team_iterations": handle_list_team_iterations,
}


def get_handler(name: str) -> Optional[Handler]:
    """Look up the handler for a tool name."""
    return HANDLERS.get(name)
