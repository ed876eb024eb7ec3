"""Tests for the formula revision resolver."""

from unittest.mock import MagicMock, patch

import pytest

from common.errors import NotFoundError, ProtocolError, TransportError
from repository.github import GitHubClient
from versioning.models import CommitRecord, ResolutionRequest
from versioning.resolver import (
    FormulaResolver,
    candidate_paths,
    commit_message,
    find_matching_commit,
    is_matching_commit,
)


def _page(*entries):
    """Build a (response, data) pair as returned by get_json."""
    response = MagicMock()
    response.links = {}
    data = [{"sha": sha, "commit": {"message": message}} for sha, message in entries]
    return response, data


@pytest.fixture
def resolver():
    """Resolver over the default homebrew-core client."""
    return FormulaResolver(GitHubClient())


class TestCandidatePaths:
    """Test candidate path construction."""

    @pytest.mark.parametrize("name", ["wget", "a", "python@3.11", "zstd"])
    def test_has_bucketed_and_flat_forms(self, name):
        """Both layouts are present and bucketed comes first."""
        paths = candidate_paths(name)

        assert paths == (f"/Formula/{name[0]}/{name}.rb", f"/Formula/{name}.rb")
        assert f"/{name[0]}/" in paths[0]

    def test_rejects_empty_name(self):
        """An empty name has no bucket."""
        with pytest.raises(ValueError):
            candidate_paths("")


class TestMatching:
    """Test the commit message predicate."""

    def test_commit_message_format(self):
        assert commit_message("wget", "1.21.3") == "wget: update 1.21.3 bottle"

    def test_substring_match(self):
        record = CommitRecord(sha="abc", message="wget: update 1.21.3 bottle.\n\nSigned-off-by: x")
        assert is_matching_commit(record, "wget: update 1.21.3 bottle")

    def test_case_sensitive(self):
        record = CommitRecord(sha="abc", message="Wget: Update 1.21.3 Bottle.")
        assert not is_matching_commit(record, "wget: update 1.21.3 bottle")

    def test_prefix_version_does_not_match(self):
        record = CommitRecord(sha="abc", message="wget: update 1.21 bottle.")
        assert not is_matching_commit(record, "wget: update 1.21.3 bottle")

    def test_first_match_in_sequence_order(self):
        records = [
            CommitRecord(sha="one", message="wget 1.21.4"),
            CommitRecord(sha="two", message="wget: update 1.21.3 bottle."),
            CommitRecord(sha="three", message="wget: update 1.21.3 bottle."),
        ]
        assert find_matching_commit(records, "wget: update 1.21.3 bottle").sha == "two"

    def test_no_match_returns_none(self):
        assert find_matching_commit([], "wget: update 1.21.3 bottle") is None


class TestFormulaResolver:
    """Test resolution against mocked history pages."""

    @patch("repository.github.get_json")
    def test_resolves_from_flat_path(self, mock_get_json, resolver):
        """Bucketed path has no match, flat path does."""
        mock_get_json.side_effect = [
            _page(("zzz999", "wget: update 1.24.5 bottle.")),
            _page(("abc123", "wget: update 1.21.3 bottle.")),
        ]

        result = resolver.resolve(ResolutionRequest("wget", "1.21.3"))

        assert result.commit_id == "abc123"
        assert result.source_path == "/Formula/wget.rb"
        assert result.content_url == (
            "https://raw.githubusercontent.com/Homebrew/homebrew-core/abc123/Formula/wget.rb"
        )
        assert mock_get_json.call_count == 2
        first_url = mock_get_json.call_args_list[0][0][0]
        second_url = mock_get_json.call_args_list[1][0][0]
        assert first_url == (
            "https://api.github.com/repos/Homebrew/homebrew-core/commits"
            "?path=/Formula/w/wget.rb&per_page=100"
        )
        assert "path=/Formula/wget.rb" in second_url

    @patch("repository.github.get_json")
    def test_stops_after_first_matching_candidate(self, mock_get_json, resolver):
        """The flat path is never queried when the bucketed path matches."""
        mock_get_json.side_effect = [
            _page(("abc123", "wget: update 1.21.3 bottle.")),
            _page(("def456", "wget: update 1.21.3 bottle.")),
        ]

        result = resolver.resolve(ResolutionRequest("wget", "1.21.3"))

        assert mock_get_json.call_count == 1
        assert result.commit_id == "abc123"
        assert result.source_path == "/Formula/w/wget.rb"

    @patch("repository.github.get_json")
    def test_returns_first_match_in_page(self, mock_get_json, resolver):
        """Priority is response order, not any other tie-break."""
        mock_get_json.side_effect = [
            _page(
                ("newer", "wget: update 1.21.3 bottle (rebuild)."),
                ("older", "wget: update 1.21.3 bottle."),
            ),
        ]

        result = resolver.resolve(ResolutionRequest("wget", "1.21.3"))

        assert result.commit_id == "newer"

    @patch("repository.github.get_json")
    def test_not_found_when_no_message_matches(self, mock_get_json, resolver):
        mock_get_json.side_effect = [
            _page(("a1", "wget 1.21.3"), ("a2", "wget: update 1.21.4 bottle.")),
            _page(("b1", "wget: update 1.21 bottle.")),
        ]

        with pytest.raises(NotFoundError) as excinfo:
            resolver.resolve(ResolutionRequest("wget", "1.21.3"))

        assert excinfo.value.package_name == "wget"
        assert excinfo.value.version == "1.21.3"
        assert mock_get_json.call_count == 2

    @patch("repository.github.get_json")
    def test_empty_histories_are_not_found(self, mock_get_json, resolver):
        mock_get_json.side_effect = [_page(), _page()]

        with pytest.raises(NotFoundError):
            resolver.resolve(ResolutionRequest("wget", "1.21.3"))

    @patch("repository.github.get_json")
    def test_non_array_body_is_protocol_error(self, mock_get_json, resolver):
        """An error object from the API is not treated as an empty history."""
        response = MagicMock()
        response.links = {}
        mock_get_json.return_value = (response, {"message": "Not Found"})

        with pytest.raises(ProtocolError):
            resolver.resolve(ResolutionRequest("wget", "1.21.3"))

        assert mock_get_json.call_count == 1

    @patch("repository.github.get_json")
    def test_transport_error_propagates(self, mock_get_json, resolver):
        mock_get_json.side_effect = TransportError("history connection error: boom")

        with pytest.raises(TransportError):
            resolver.resolve(ResolutionRequest("wget", "1.21.3"))

    def test_uses_injected_client(self):
        """Any object exposing iter_commits/raw_url can back the resolver."""
        client = MagicMock()
        client.iter_commits.return_value = iter([CommitRecord("abc123", "jq: update 1.7 bottle.")])
        client.raw_url.side_effect = lambda sha, path: f"raw://{sha}{path}"

        result = FormulaResolver(client, max_pages=3).resolve(ResolutionRequest("jq", "1.7"))

        client.iter_commits.assert_called_once_with("/Formula/j/jq.rb", per_page=100, max_pages=3)
        assert result.content_url == "raw://abc123/Formula/j/jq.rb"


class TestMultiPageHistory:
    """Test resolution when more than one history page is allowed."""

    @staticmethod
    def _linked_page(next_url, *entries):
        response, data = _page(*entries)
        response.links = {"next": {"url": next_url}} if next_url else {}
        return response, data

    @patch("repository.github.get_json")
    def test_match_on_first_page_fetches_one_page(self, mock_get_json):
        mock_get_json.side_effect = [
            self._linked_page("https://api.github.com/p2", ("abc123", "wget: update 1.21.3 bottle.")),
            self._linked_page("https://api.github.com/p3", ("b1", "wget: update 1.21.2 bottle.")),
            self._linked_page(None, ("c1", "wget: update 1.21.1 bottle.")),
        ]

        result = FormulaResolver(GitHubClient(), max_pages=3).resolve(
            ResolutionRequest("wget", "1.21.3")
        )

        assert result.commit_id == "abc123"
        assert mock_get_json.call_count == 1

    @patch("repository.github.get_json")
    def test_match_on_second_page_stops_there(self, mock_get_json):
        mock_get_json.side_effect = [
            self._linked_page("https://api.github.com/p2", ("a1", "wget: update 1.22.0 bottle.")),
            self._linked_page("https://api.github.com/p3", ("abc123", "wget: update 1.21.3 bottle.")),
            self._linked_page(None, ("c1", "wget: update 1.21.1 bottle.")),
        ]

        result = FormulaResolver(GitHubClient(), max_pages=3).resolve(
            ResolutionRequest("wget", "1.21.3")
        )

        assert result.commit_id == "abc123"
        assert result.source_path == "/Formula/w/wget.rb"
        assert mock_get_json.call_count == 2
