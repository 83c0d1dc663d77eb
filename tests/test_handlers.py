"""Tests for tool handlers against a scripted Azure DevOps API."""
import base64

import pytest

from azdo_mcp import handlers


def _text(result):
    return result.content[0].text


def _ids_param(request):
    return [int(i) for i in request.url.params["ids"].split(",")]


def _hydrate(request):
    """Answer a work items batch GET with one record per requested id."""
    return {
        "value": [
            {
                "id": i,
                "fields": {
                    "System.WorkItemType": "Task",
                    "System.Title": f"Item {i}",
                    "System.State": "Active",
                    "System.ChangedDate": "2024-03-05T10:00:00Z",
                },
            }
            for i in _ids_param(request)
        ]
    }


class TestCoreHandlers:
    """Test project and team listings."""

    @pytest.mark.asyncio
    async def test_list_projects(self, connection, ado):
        ado.add("GET", "/_apis/projects", {"value": [
            {"id": "p1", "name": "Fabrikam", "state": "wellFormed", "visibility": "private",
             "description": "Main product", "url": "https://dev.azure.com/contoso/_apis/projects/p1"},
            {"id": "p2", "name": "Tailspin", "state": "wellFormed", "visibility": "public",
             "url": "https://dev.azure.com/contoso/_apis/projects/p2"},
        ]})

        result = await handlers.handle_list_projects({}, connection)

        text = _text(result)
        assert not result.isError
        assert text.startswith("# Azure DevOps Projects\n\nFound 2 projects:\n\n## Fabrikam\n")
        assert "- **Description:** Main product\n" in text
        assert text.count("**Description:**") == 1

        request = ado.requests[0]
        expected = base64.b64encode(b":secret-pat").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.url.params["api-version"] == "7.1"
        assert "stateFilter" not in request.url.params

    @pytest.mark.asyncio
    async def test_list_projects_accepts_missing_arguments(self, connection, ado):
        ado.add("GET", "/_apis/projects", {"value": []})

        result = await handlers.handle_list_projects(None, connection)

        assert "Found 0 projects:" in _text(result)

    @pytest.mark.asyncio
    async def test_list_teams(self, connection, ado):
        ado.add("GET", "/_apis/projects/Fabrikam/teams", {"value": [
            {"id": "t1", "name": "Web Team", "description": "Front end",
             "url": "https://dev.azure.com/contoso/_apis/projects/Fabrikam/teams/t1"},
            {"id": "t2", "name": "Ops", "url": "https://dev.azure.com/contoso/_apis/projects/Fabrikam/teams/t2"},
        ]})

        result = await handlers.handle_list_project_teams({"project": "Fabrikam", "top": 10}, connection)

        text = _text(result)
        assert text.startswith("# Teams in Fabrikam\n\nFound 2 teams:\n\n## Web Team\n- **ID:** t1\n")
        assert "- **Description:** Front end\n" in text
        assert "## Ops\n- **ID:** t2\n- **URL:** " in text
        assert ado.requests[0].url.params["$top"] == "10"

    @pytest.mark.asyncio
    async def test_list_teams_requires_project(self, connection, ado):
        result = await handlers.handle_list_project_teams({}, connection)

        assert result.isError
        assert _text(result) == "Missing required parameters: project"
        assert ado.requests == []


class TestWorkItemHandlers:
    """Test work item retrieval, mutation and WIQL based listings."""

    @pytest.mark.asyncio
    async def test_get_work_item(self, connection, ado):
        ado.add("GET", "/_apis/wit/workitems/42", {
            "id": 42,
            "fields": {"System.Title": "Fix bug", "System.WorkItemType": "Bug"},
        })

        result = await handlers.handle_get_work_item({"id": 42}, connection)

        assert not result.isError
        assert "**Title:** Fix bug" in _text(result)

    @pytest.mark.asyncio
    async def test_get_work_item_not_found(self, connection, ado):
        ado.add("GET", "/_apis/wit/workitems/9", {"message": "TF401232: Work item 9 does not exist"},
                status_code=404)

        result = await handlers.handle_get_work_item({"id": 9}, connection)

        assert result.isError
        assert _text(result) == (
            "Error getting work item: Azure DevOps API error (404): "
            "TF401232: Work item 9 does not exist"
        )

    @pytest.mark.asyncio
    async def test_get_work_item_without_arguments(self, connection, ado):
        result = await handlers.handle_get_work_item(None, connection)

        assert result.isError
        assert _text(result) == "No arguments provided"
        assert ado.requests == []

    @pytest.mark.asyncio
    async def test_batch_fetch_splits_into_chunks_of_200(self, connection, ado):
        ado.add("GET", "/_apis/wit/workitems", _hydrate)
        ids = list(range(1, 451))

        result = await handlers.handle_get_work_items_batch(
            {"ids": ids, "project": "Fabrikam"}, connection
        )

        assert [len(_ids_param(r)) for r in ado.requests] == [200, 200, 50]
        assert "Found 450 work items:" in _text(result)

    @pytest.mark.asyncio
    async def test_create_work_item(self, connection, ado):
        ado.add("POST", "Bug", {
            "id": 101,
            "_links": {"html": {"href": "https://dev.azure.com/contoso/_workitems/edit/101"}},
        })

        result = await handlers.handle_create_work_item(
            {"project": "Fabrikam", "workItemType": "Bug", "title": "Crash on save", "tags": "ui"},
            connection,
        )

        assert _text(result) == (
            "# Work Item Created\n\n**ID:** 101\n**Type:** Bug\n**Title:** Crash on save\n"
            "**URL:** https://dev.azure.com/contoso/_workitems/edit/101"
        )
        request = ado.requests[0]
        assert request.headers["Content-Type"] == "application/json-patch+json"
        assert ado.json_body() == [
            {"op": "add", "path": "/fields/System.Title", "value": "Crash on save"},
            {"op": "add", "path": "/fields/System.Tags", "value": "ui"},
        ]

    @pytest.mark.asyncio
    async def test_update_work_item_replaces_fields(self, connection, ado):
        ado.add("PATCH", "/_apis/wit/workitems/42", {"id": 42})

        result = await handlers.handle_update_work_item(
            {"id": 42, "project": "Fabrikam", "state": "Closed"}, connection
        )

        assert _text(result) == "# Work Item Updated\n\n**ID:** 42\n**Updated successfully**"
        assert ado.json_body() == [{"op": "replace", "path": "/fields/System.State", "value": "Closed"}]

    @pytest.mark.asyncio
    async def test_update_work_item_needs_a_field(self, connection, ado):
        result = await handlers.handle_update_work_item({"id": 42, "project": "Fabrikam"}, connection)

        assert result.isError
        assert "At least one of the following parameters is required" in _text(result)
        assert ado.requests == []

    @pytest.mark.asyncio
    async def test_my_work_items_clamps_top_to_200(self, connection, ado):
        ado.add("POST", "/_apis/wit/wiql", {"workItems": [{"id": i} for i in range(1, 251)]})
        ado.add("GET", "/_apis/wit/workitems", _hydrate)

        result = await handlers.handle_my_work_items({"top": 500}, connection)

        text = _text(result)
        assert text.startswith("# My Work Items\n\nFound 250 work items (showing 200):\n\n")
        assert "| ID | Type | Title | State | Changed Date |" in text
        assert "| 1 | Task | Item 1 | Active | 2024-03-05 |" in text
        assert len(_ids_param(ado.requests[1])) == 200
        assert len(ado.requests) == 2

    @pytest.mark.asyncio
    async def test_my_work_items_escapes_filters(self, connection, ado):
        ado.add("POST", "/_apis/wit/wiql", {"workItems": []})

        result = await handlers.handle_my_work_items(
            {"project": "O'Brien", "state": "Active", "type": "Bug"}, connection
        )

        assert _text(result) == "No work items found"
        query = ado.json_body(0)["query"]
        assert "[System.AssignedTo] = @Me" in query
        assert "[System.TeamProject] = 'O''Brien'" in query
        assert "[System.State] = 'Active'" in query
        assert "[System.WorkItemType] = 'Bug'" in query
        assert query.endswith("ORDER BY [System.ChangedDate] DESC")
        assert len(ado.requests) == 1

    @pytest.mark.asyncio
    async def test_query_results_default_to_50(self, connection, ado):
        ado.add("GET", "/_apis/wit/wiql/q-1", {"workItems": [{"id": i} for i in range(1, 81)]})
        ado.add("GET", "/_apis/wit/workitems", _hydrate)

        result = await handlers.handle_get_query_results_by_id(
            {"project": "Fabrikam", "queryId": "q-1"}, connection
        )

        assert "Found 80 work items (showing 50):" in _text(result)
        assert _ids_param(ado.requests[1]) == list(range(1, 51))

    @pytest.mark.asyncio
    async def test_add_comment(self, connection, ado):
        ado.add("POST", "/_apis/wit/workItems/42/comments", {"id": 1})

        result = await handlers.handle_add_work_item_comment(
            {"project": "Fabrikam", "workItemId": 42, "comment": "Looks good"}, connection
        )

        assert _text(result) == "Comment added to work item 42"
        assert ado.json_body() == {"text": "Looks good"}
        assert ado.requests[0].url.params["api-version"] == "7.1-preview.4"

    @pytest.mark.asyncio
    async def test_list_comments(self, connection, ado):
        ado.add("GET", "/_apis/wit/workItems/42/comments", {"comments": [
            {"text": "First", "createdBy": {"displayName": "Ada"}, "createdDate": "2024-03-05T10:00:00Z"},
            {"text": "Second", "createdDate": "2024-03-06T10:00:00Z"},
        ]})

        result = await handlers.handle_list_work_item_comments(
            {"project": "Fabrikam", "workItemId": 42}, connection
        )

        text = _text(result)
        assert text.startswith("# Comments for Work Item 42\n\n")
        assert "## Ada - 2024-03-05\nFirst\n\n" in text
        assert "## Unknown - 2024-03-06\nSecond\n\n" in text

    @pytest.mark.asyncio
    async def test_list_comments_empty(self, connection, ado):
        ado.add("GET", "/_apis/wit/workItems/42/comments", {"comments": []})

        result = await handlers.handle_list_work_item_comments(
            {"project": "Fabrikam", "workItemId": 42}, connection
        )

        assert _text(result) == "# Comments for Work Item 42\n\nNo comments found.\n"


class TestRepositoryHandlers:
    """Test repository, branch and pull request handlers."""

    @pytest.mark.asyncio
    async def test_list_repositories(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/git/repositories", {"value": [
            {"id": "r1", "name": "web", "remoteUrl": "https://contoso@dev.azure.com/web",
             "webUrl": "https://dev.azure.com/contoso/Fabrikam/_git/web"},
        ]})

        result = await handlers.handle_list_repos_by_project({"project": "Fabrikam"}, connection)

        text = _text(result)
        assert text.startswith("# Repositories in Fabrikam\n\nFound 1 repositories:\n\n## web\n")
        assert "- **Default Branch:** N/A\n" in text

    @pytest.mark.asyncio
    async def test_get_repository(self, connection, ado):
        ado.add("GET", "/_apis/git/repositories/web", {
            "id": "r1", "name": "web", "defaultBranch": "refs/heads/main", "size": 2048,
            "remoteUrl": "https://contoso@dev.azure.com/web",
            "webUrl": "https://dev.azure.com/contoso/Fabrikam/_git/web",
            "project": {"name": "Fabrikam"},
        })

        result = await handlers.handle_get_repo_by_name_or_id(
            {"project": "Fabrikam", "repositoryNameOrId": "web"}, connection
        )

        assert _text(result) == (
            "# Repository: web\n\n"
            "- **ID:** r1\n"
            "- **Default Branch:** refs/heads/main\n"
            "- **Size:** 2048 bytes\n"
            "- **Remote URL:** https://contoso@dev.azure.com/web\n"
            "- **Web URL:** https://dev.azure.com/contoso/Fabrikam/_git/web\n"
            "- **Project:** Fabrikam\n"
        )

    @pytest.mark.asyncio
    async def test_get_repository_not_found(self, connection, ado):
        result = await handlers.handle_get_repo_by_name_or_id(
            {"project": "Fabrikam", "repositoryNameOrId": "missing"}, connection
        )

        assert result.isError
        assert _text(result).startswith("Error getting repository: Azure DevOps API error (404):")

    @pytest.mark.asyncio
    async def test_list_branches(self, connection, ado):
        ado.add("GET", "/_apis/git/repositories/r1/stats/branches", {"value": [
            {"name": "main", "commit": {"commitId": "0123456789abcdef",
                                        "author": {"name": "Ada", "date": "2024-03-05T10:00:00Z"}}},
        ]})

        result = await handlers.handle_list_branches_by_repo(
            {"project": "Fabrikam", "repositoryId": "r1"}, connection
        )

        assert "- **main**\n  - Commit: 01234567\n  - Author: Ada\n  - Date: 2024-03-05\n" in _text(result)

    @pytest.mark.asyncio
    async def test_get_branch_accepts_full_ref_name(self, connection, ado):
        ado.add("GET", "/_apis/git/repositories/r1/stats/branches", {
            "name": "main",
            "commit": {"commitId": "abc", "comment": "Initial", "author": {"name": "Ada", "email": "ada@contoso.com"}},
        })

        result = await handlers.handle_get_branch_by_name(
            {"project": "Fabrikam", "repositoryId": "r1", "branchName": "refs/heads/main"}, connection
        )

        assert ado.requests[0].url.params["name"] == "main"
        text = _text(result)
        assert text.startswith("# Branch: main\n\n")
        assert "**Email:** ada@contoso.com\n" in text

    @pytest.mark.asyncio
    async def test_list_pull_requests_project_wide(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/git/pullrequests", {"value": [
            {"pullRequestId": 7, "title": "Add | pipes", "status": "active",
             "createdBy": {"displayName": "Ada"}, "creationDate": "2024-03-05T10:00:00Z"},
        ]})

        result = await handlers.handle_list_pull_requests({"project": "Fabrikam"}, connection)

        params = ado.requests[0].url.params
        assert params["searchCriteria.status"] == "active"
        assert params["$top"] == "50"
        assert "| 7 | Add \\| pipes | active | Ada | 2024-03-05 |" in _text(result)

    @pytest.mark.asyncio
    async def test_get_pull_request_without_description(self, connection, ado):
        ado.add("GET", "/_apis/git/repositories/r1/pullrequests/7", {
            "pullRequestId": 7, "title": "Feature", "status": "active",
            "sourceRefName": "refs/heads/feature", "targetRefName": "refs/heads/main",
        })

        result = await handlers.handle_get_pull_request_by_id(
            {"project": "Fabrikam", "repositoryId": "r1", "pullRequestId": 7}, connection
        )

        text = _text(result)
        assert text.startswith("# Pull Request 7\n\n**Title:** Feature\n")
        assert text.endswith("## Description\nNo description\n")

    @pytest.mark.asyncio
    async def test_create_pull_request_missing_title(self, connection, ado):
        result = await handlers.handle_create_pull_request(
            {"project": "Fabrikam", "repositoryId": "r1",
             "sourceRefName": "refs/heads/feature", "targetRefName": "refs/heads/main"},
            connection,
        )

        assert result.isError
        assert _text(result) == "Missing required parameters: title"
        assert ado.requests == []

    @pytest.mark.asyncio
    async def test_create_pull_request(self, connection, ado):
        ado.add("POST", "/_apis/git/repositories/r1/pullrequests", {
            "pullRequestId": 8, "title": "Feature", "url": "https://dev.azure.com/pr/8",
        })

        result = await handlers.handle_create_pull_request(
            {"project": "Fabrikam", "repositoryId": "r1", "title": "Feature",
             "sourceRefName": "refs/heads/feature", "targetRefName": "refs/heads/main"},
            connection,
        )

        assert _text(result) == (
            "# Pull Request Created\n\n**ID:** 8\n**Title:** Feature\n**URL:** https://dev.azure.com/pr/8"
        )
        assert ado.json_body() == {
            "title": "Feature",
            "sourceRefName": "refs/heads/feature",
            "targetRefName": "refs/heads/main",
        }


class TestBuildHandlers:

    @pytest.mark.asyncio
    async def test_get_builds(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/build/builds", {"value": [
            {"id": 3, "definition": {"name": "CI"}, "status": "inProgress",
             "startTime": "2024-03-05T10:00:00Z"},
        ]})

        result = await handlers.handle_get_builds(
            {"project": "Fabrikam", "definitions": [1, 2], "top": 5}, connection
        )

        assert ado.requests[0].url.params["definitions"] == "1,2"
        assert "| 3 | CI | inProgress | N/A | 2024-03-05 |" in _text(result)

    @pytest.mark.asyncio
    async def test_get_build_status(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/build/builds/3", {
            "id": 3, "definition": {"name": "CI"}, "status": "completed", "result": "succeeded",
            "sourceBranch": "refs/heads/main",
            "startTime": "2024-03-05T10:00:00Z", "finishTime": "2024-03-05T10:20:00Z",
            "requestedBy": {"displayName": "Build Service"}, "requestedFor": {"displayName": "Ada"},
        })

        result = await handlers.handle_get_build_status({"project": "Fabrikam", "buildId": 3}, connection)

        assert _text(result) == (
            "# Build 3\n\n"
            "**Definition:** CI\n"
            "**Status:** completed\n"
            "**Result:** succeeded\n"
            "**Source Branch:** refs/heads/main\n"
            "**Started:** 2024-03-05\n"
            "**Finished:** 2024-03-05\n"
            "**Requested By:** Build Service\n"
            "**Requested For:** Ada\n"
        )

    @pytest.mark.asyncio
    async def test_get_build_definitions_honours_top(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/build/definitions", {"value": [
            {"id": 1, "name": "CI", "path": "\\", "type": "build", "queueStatus": "enabled"},
        ]})

        result = await handlers.handle_get_build_definitions({"project": "Fabrikam", "top": 10}, connection)

        assert ado.requests[0].url.params["$top"] == "10"
        assert "## CI\n- **ID:** 1\n" in _text(result)


class TestWikiHandlers:

    @pytest.mark.asyncio
    async def test_list_wikis(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/wiki/wikis", {"value": [
            {"id": "w1", "name": "Fabrikam.wiki", "type": "projectWiki", "projectId": "p1",
             "url": "https://dev.azure.com/contoso/_apis/wiki/wikis/w1"},
            {"id": "w2", "name": "docs", "type": "codeWiki",
             "url": "https://dev.azure.com/contoso/_apis/wiki/wikis/w2"},
        ]})

        result = await handlers.handle_list_wikis({"project": "Fabrikam"}, connection)

        text = _text(result)
        assert text.startswith("# Wikis\n\nFound 2 wikis:\n\n## Fabrikam.wiki\n")
        assert "- **Type:** projectWiki\n- **Project ID:** p1\n" in text
        assert "## docs\n- **ID:** w2\n- **Type:** codeWiki\n- **URL:** " in text

    @pytest.mark.asyncio
    async def test_get_page_content_returns_raw_markdown(self, connection, ado):
        ado.add("GET", "/_apis/wiki/wikis/docs/pages", {"path": "/Home", "content": "# Home\nWelcome"})

        result = await handlers.handle_get_page_content(
            {"project": "Fabrikam", "wikiIdentifier": "docs", "path": "/Home"}, connection
        )

        assert _text(result) == "# Home\nWelcome"
        assert ado.requests[0].url.params["includeContent"] == "true"

    @pytest.mark.asyncio
    async def test_list_pages(self, connection, ado):
        ado.add("POST", "/_apis/wiki/wikis/docs/pagesbatch", {"value": [{"id": 1, "path": "/Home"}]})

        result = await handlers.handle_list_pages({"project": "Fabrikam", "wikiIdentifier": "docs"}, connection)

        assert _text(result) == "# Wiki Pages\n\nFound 1 pages:\n\n- **/Home** (ID: 1)\n"
        assert ado.json_body() == {"top": 100}


class TestSearchHandlers:
    """Test full-text search over code, wiki and work item titles."""

    @pytest.mark.asyncio
    async def test_search_code(self, connection, ado):
        ado.add("POST", "/_apis/search/codesearchresults", {"count": 1, "results": [
            {"path": "/src/app.py", "repository": {"name": "web"}, "project": {"name": "Fabrikam"},
             "contentId": "c1"},
        ]})

        result = await handlers.handle_search_code(
            {"searchText": "def main", "project": ["Fabrikam"], "repository": []}, connection
        )

        text = _text(result)
        assert text.startswith('# Code Search Results\n\nSearch query: "def main"\n\nFound 1 results:\n\n')
        assert "## Result 1\n**File:** /src/app.py\n**Repository:** web\n" in text
        assert "**Content ID:** c1\n" in text

        request = ado.requests[0]
        assert request.url.params["api-version"] == "7.1-preview.1"
        assert ado.json_body() == {
            "searchText": "def main",
            "includeFacets": False,
            "$skip": 0,
            "$top": 5,
            "filters": {"Project": ["Fabrikam"]},
        }

    @pytest.mark.asyncio
    async def test_search_code_service_error(self, connection, ado):
        ado.add("POST", "/_apis/search/codesearchresults", "search is not enabled", status_code=400)

        result = await handlers.handle_search_code({"searchText": "x"}, connection)

        assert result.isError
        text = _text(result)
        assert text.startswith("Azure DevOps Code Search API error: 400 Bad Request\nURL: ")
        assert text.endswith("\nError: search is not enabled")

    @pytest.mark.asyncio
    async def test_search_wiki(self, connection, ado):
        ado.add("POST", "/_apis/search/wikisearchresults", {"count": 1, "results": [
            {"fileName": "Onboarding.md", "path": "/Team/Onboarding.md", "wiki": {"name": "docs"},
             "project": {"name": "Fabrikam"}, "hitHighlights": ["first <highlighthit>onboarding</highlighthit> step", "second"]},
        ]})

        result = await handlers.handle_search_wiki(
            {"searchText": "onboarding", "wiki": ["docs"], "top": 3}, connection
        )

        text = _text(result)
        assert text.startswith('# Wiki Search Results\n\nSearch query: "onboarding"\n\nFound 1 results:\n\n')
        assert (
            "## Result 1\n"
            "**Title:** Onboarding.md\n"
            "**Path:** /Team/Onboarding.md\n"
            "**Wiki:** docs\n"
            "**Project:** Fabrikam\n"
        ) in text
        assert "**Preview:** first <highlighthit>onboarding</highlighthit> step, second\n" in text
        body = ado.json_body()
        assert body["filters"] == {"Wiki": ["docs"]}
        assert body["$top"] == 3

    @pytest.mark.asyncio
    async def test_search_wiki_no_results(self, connection, ado):
        ado.add("POST", "/_apis/search/wikisearchresults", {"count": 0, "results": []})

        result = await handlers.handle_search_wiki({"searchText": "onboarding"}, connection)

        assert _text(result) == '# Wiki Search Results\n\nSearch query: "onboarding"\n\nNo results found.\n'
        assert ado.json_body()["$top"] == 10

    @pytest.mark.asyncio
    async def test_search_workitem(self, connection, ado):
        ado.add("POST", "/_apis/wit/wiql", {"workItems": [{"id": 5}]})
        ado.add("GET", "/_apis/wit/workitems", _hydrate)

        result = await handlers.handle_search_workitem({"searchText": "can't login"}, connection)

        assert "[System.Title] CONTAINS 'can''t login'" in ado.json_body(0)["query"]
        text = _text(result)
        assert text.startswith("# Search Results\n\nFound 1 work items (showing 1):\n\n")
        assert "| 5 | Task | Item 5 | Active |" in text


class TestIterationHandlers:

    @pytest.mark.asyncio
    async def test_list_team_iterations(self, connection, ado):
        ado.add("GET", "/_apis/work/teamsettings/iterations", {"value": [
            {"id": "i1", "name": "Sprint 1", "path": "Fabrikam\\Sprint 1",
             "attributes": {"startDate": "2024-01-01T00:00:00Z", "finishDate": "2024-01-14T00:00:00Z",
                            "timeFrame": "past"}},
        ]})

        result = await handlers.handle_list_team_iterations(
            {"project": "Fabrikam", "team": "Web Team"}, connection
        )

        text = _text(result)
        assert text.startswith("# Team Iterations\n\nFound 1 iterations for team Web Team:\n\n")
        assert "- **Time Frame:** past\n" in text
        assert b"/Fabrikam/Web%20Team/_apis/work/teamsettings/iterations" in ado.requests[0].url.raw_path

    @pytest.mark.asyncio
    async def test_list_iterations_default_team(self, connection, ado):
        ado.add("GET", "/Fabrikam/_apis/work/teamsettings/iterations", {"value": []})

        result = await handlers.handle_list_iterations({"project": "Fabrikam"}, connection)

        assert _text(result) == "# Iterations\n\nFound 0 iterations:\n\n"
