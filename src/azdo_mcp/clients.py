"""Typed area clients over an ``AdoConnection``.

Each client maps one Python method to one Azure DevOps REST endpoint and
returns the decoded JSON (list endpoints return the ``value`` array). Errors
propagate as ``AdoApiError`` from the connection.
"""
from typing import Any, Optional
from urllib.parse import quote

JSON_PATCH_CONTENT_TYPE = "application/json-patch+json"
COMMENTS_API_VERSION = "7.1-preview.4"

# Work items batch endpoint accepts at most 200 ids per request
WORK_ITEMS_BATCH_SIZE = 200


def quote_segment(value: Any) -> str:
    """Quote a value for use as a single URL path segment."""
    return quote(str(value), safe="")


def _scoped(project: Optional[str], path: str) -> str:
    """Prefix an API path with the project segment when a project is given."""
    if project:
        return f"{quote_segment(project)}/{path}"
    return path


class _AreaClient:
    def __init__(self, connection):
        self.connection = connection

    async def _get_value(self, path: str, params: Optional[dict] = None) -> list[dict]:
        result = await self.connection.send("GET", path, params=params)
        return result.get("value", [])


# ============================================================================
# Core (projects, teams)
# ============================================================================

class CoreApi(_AreaClient):

    async def get_projects(
        self,
        state_filter: Optional[str] = None,
        top: Optional[int] = None,
    ) -> list[dict]:
        return await self._get_value(
            "_apis/projects", params={"stateFilter": state_filter, "$top": top}
        )

    async def get_teams(self, project: str, top: Optional[int] = None) -> list[dict]:
        return await self._get_value(
            f"_apis/projects/{quote_segment(project)}/teams", params={"$top": top}
        )


# ============================================================================
# Work Item Tracking
# ============================================================================

class WorkItemTrackingApi(_AreaClient):

    async def get_work_item(
        self,
        work_item_id: int,
        expand: Optional[str] = None,
        project: Optional[str] = None,
    ) -> dict:
        path = _scoped(project, f"_apis/wit/workitems/{quote_segment(work_item_id)}")
        return await self.connection.send("GET", path, params={"$expand": expand})

    async def get_work_items(
        self,
        ids: list[int],
        fields: Optional[list[str]] = None,
    ) -> list[dict]:
        """Fetch full records for ``ids``, batching to the endpoint's id limit."""
        work_items = []
        for start in range(0, len(ids), WORK_ITEMS_BATCH_SIZE):
            batch = ids[start:start + WORK_ITEMS_BATCH_SIZE]
            params = {
                "ids": ",".join(str(i) for i in batch),
                "fields": ",".join(fields) if fields else None,
            }
            work_items.extend(await self._get_value("_apis/wit/workitems", params=params))
        return work_items

    async def create_work_item(
        self,
        document: list[dict],
        project: str,
        work_item_type: str,
    ) -> dict:
        path = f"{quote_segment(project)}/_apis/wit/workitems/${quote_segment(work_item_type)}"
        return await self.connection.send(
            "POST", path, json=document, content_type=JSON_PATCH_CONTENT_TYPE
        )

    async def update_work_item(
        self,
        document: list[dict],
        work_item_id: int,
        project: Optional[str] = None,
    ) -> dict:
        path = _scoped(project, f"_apis/wit/workitems/{quote_segment(work_item_id)}")
        return await self.connection.send(
            "PATCH", path, json=document, content_type=JSON_PATCH_CONTENT_TYPE
        )

    async def query_by_wiql(self, query: str, project: Optional[str] = None) -> dict:
        """Run a WIQL query; the result's ``workItems`` holds bare id references."""
        return await self.connection.send(
            "POST", _scoped(project, "_apis/wit/wiql"), json={"query": query}
        )

    async def query_by_id(self, query_id: str, project: str) -> dict:
        return await self.connection.send(
            "GET", f"{quote_segment(project)}/_apis/wit/wiql/{quote_segment(query_id)}"
        )

    async def add_comment(self, text: str, project: str, work_item_id: int) -> dict:
        path = f"{quote_segment(project)}/_apis/wit/workItems/{quote_segment(work_item_id)}/comments"
        return await self.connection.send(
            "POST", path, json={"text": text}, api_version=COMMENTS_API_VERSION
        )

    async def get_comments(
        self,
        project: str,
        work_item_id: int,
        top: Optional[int] = None,
    ) -> dict:
        path = f"{quote_segment(project)}/_apis/wit/workItems/{quote_segment(work_item_id)}/comments"
        return await self.connection.send(
            "GET", path, params={"$top": top}, api_version=COMMENTS_API_VERSION
        )


# ============================================================================
# Git (repositories, branches, pull requests)
# ============================================================================

class GitApi(_AreaClient):

    def _repo_path(self, project: str, repository: str, suffix: str = "") -> str:
        path = f"{quote_segment(project)}/_apis/git/repositories/{quote_segment(repository)}"
        return f"{path}/{suffix}" if suffix else path

    async def get_repositories(self, project: str) -> list[dict]:
        return await self._get_value(f"{quote_segment(project)}/_apis/git/repositories")

    async def get_repository(self, repository_name_or_id: str, project: str) -> dict:
        return await self.connection.send("GET", self._repo_path(project, repository_name_or_id))

    async def get_branches(self, repository_id: str, project: str) -> list[dict]:
        return await self._get_value(self._repo_path(project, repository_id, "stats/branches"))

    async def get_branch(self, repository_id: str, name: str, project: str) -> dict:
        """Get branch statistics; ``name`` is the short branch name (``main``)."""
        return await self.connection.send(
            "GET",
            self._repo_path(project, repository_id, "stats/branches"),
            params={"name": name},
        )

    async def get_pull_requests(
        self,
        repository_id: Optional[str],
        search_criteria: dict,
        project: str,
        skip: int = 0,
        top: int = 50,
    ) -> list[dict]:
        """List pull requests in one repository, or project-wide without a repository."""
        if repository_id:
            path = self._repo_path(project, repository_id, "pullrequests")
        else:
            path = f"{quote_segment(project)}/_apis/git/pullrequests"

        params = {f"searchCriteria.{k}": v for k, v in search_criteria.items()}
        params["$skip"] = skip
        params["$top"] = top
        return await self._get_value(path, params=params)

    async def get_pull_request(
        self,
        repository_id: str,
        pull_request_id: int,
        project: str,
    ) -> dict:
        return await self.connection.send(
            "GET", self._repo_path(project, repository_id, f"pullrequests/{quote_segment(pull_request_id)}")
        )

    async def create_pull_request(
        self,
        pull_request: dict,
        repository_id: str,
        project: str,
    ) -> dict:
        body = {k: v for k, v in pull_request.items() if v is not None}
        return await self.connection.send(
            "POST", self._repo_path(project, repository_id, "pullrequests"), json=body
        )


# ============================================================================
# Build
# ============================================================================

class BuildApi(_AreaClient):

    async def get_builds(
        self,
        project: str,
        definitions: Optional[list[int]] = None,
        status_filter: Optional[str] = None,
        result_filter: Optional[str] = None,
        top: Optional[int] = None,
    ) -> list[dict]:
        params = {
            "definitions": ",".join(str(d) for d in definitions) if definitions else None,
            "statusFilter": status_filter,
            "resultFilter": result_filter,
            "$top": top,
        }
        return await self._get_value(f"{quote_segment(project)}/_apis/build/builds", params=params)

    async def get_build(self, project: str, build_id: int) -> dict:
        return await self.connection.send(
            "GET", f"{quote_segment(project)}/_apis/build/builds/{quote_segment(build_id)}"
        )

    async def get_definitions(
        self,
        project: str,
        name: Optional[str] = None,
        top: Optional[int] = None,
    ) -> list[dict]:
        return await self._get_value(
            f"{quote_segment(project)}/_apis/build/definitions",
            params={"name": name, "$top": top},
        )


# ============================================================================
# Wiki
# ============================================================================

class WikiApi(_AreaClient):

    def _wiki_path(self, project: str, wiki_identifier: str, suffix: str) -> str:
        return f"{quote_segment(project)}/_apis/wiki/wikis/{quote_segment(wiki_identifier)}/{suffix}"

    async def get_all_wikis(self, project: Optional[str] = None) -> list[dict]:
        return await self._get_value(_scoped(project, "_apis/wiki/wikis"))

    async def get_page_text(self, project: str, wiki_identifier: str, path: str) -> str:
        """Return the markdown source of one wiki page."""
        result = await self.connection.send(
            "GET",
            self._wiki_path(project, wiki_identifier, "pages"),
            params={"path": path, "includeContent": "true"},
        )
        return result.get("content") or ""

    async def get_pages_batch(
        self,
        project: str,
        wiki_identifier: str,
        top: int = 100,
    ) -> list[dict]:
        result = await self.connection.send(
            "POST", self._wiki_path(project, wiki_identifier, "pagesbatch"), json={"top": top}
        )
        return result.get("value", [])


# ============================================================================
# Work (iterations)
# ============================================================================

class WorkApi(_AreaClient):

    async def get_team_iterations(
        self,
        project: str,
        team: Optional[str] = None,
    ) -> list[dict]:
        """List iterations of ``team``, or of the project's default team."""
        scope = quote_segment(project)
        if team:
            scope = f"{scope}/{quote_segment(team)}"
        return await self._get_value(f"{scope}/_apis/work/teamsettings/iterations")
