import io

import pytest

from minigit.graph import compute_hash
from minigit.storage import HEAD_FILE, INDEX_FILE, REFS_HEADS_DIR
from minigit.vcs import MiniGitError, Repository


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def repo(tmp_path, out):
    repository = Repository(tmp_path, out)
    repository.init()
    return repository


def write(repo, name, content):
    (repo.storage.root / name).write_text(content)


def read(repo, name):
    return (repo.storage.root / name).read_text()


def commit_file(repo, name, content, message):
    write(repo, name, content)
    repo.add(name)
    repo.commit(message)
    return repo.storage.resolve_head()


def test_init_creates_repository(tmp_path, out):
    repository = Repository(tmp_path, out)
    repository.init()
    assert "Initialized empty MiniGit repository." in out.getvalue()
    assert repository.storage.read_file(HEAD_FILE) == "ref: refs/heads/main\n"
    assert repository.storage.read_file(f"{REFS_HEADS_DIR}/main") == ""


def test_init_twice_raises(repo):
    with pytest.raises(MiniGitError, match="already exists"):
        repo.init()


def test_add_missing_file_raises(repo):
    with pytest.raises(MiniGitError, match="does not exist"):
        repo.add("nope.txt")


def test_add_stages_file(repo, out):
    write(repo, "a.txt", "hello\n")
    repo.add("a.txt")
    expected = compute_hash("hello\n")
    assert repo.storage.read_index() == [("a.txt", expected)]
    assert f"Staged file: a.txt ({expected[:7]})" in out.getvalue()
    assert repo.storage.read_blob(expected) == "hello\n"


def test_add_twice_updates_entry(repo):
    write(repo, "a.txt", "one\n")
    repo.add("a.txt")
    write(repo, "a.txt", "two\n")
    repo.add("a.txt")
    assert repo.storage.read_index() == [("a.txt", compute_hash("two\n"))]


def test_commit_with_empty_index(repo, out):
    repo.commit("nothing")
    assert "Nothing to commit." in out.getvalue()
    assert repo.storage.resolve_head() == ""


def test_commit_records_data_and_updates_branch(repo, out):
    head = commit_file(repo, "a.txt", "hello\n", "first")
    data = repo.storage.read_commit(head)
    assert head == compute_hash(data)
    assert "message: first\n" in data
    assert f"file: a.txt {compute_hash('hello' + chr(10))}\n" in data
    assert "parent:" not in data
    assert repo.storage.read_reference("main") == head
    assert repo.storage.read_file(INDEX_FILE) == ""
    assert f"Committed as {head[:7]}: first" in out.getvalue()


def test_second_commit_has_parent(repo):
    first = commit_file(repo, "a.txt", "one\n", "first")
    second = commit_file(repo, "a.txt", "two\n", "second")
    assert f"parent: {first}\n" in repo.storage.read_commit(second)
    assert repo.graph.parents(second) == [first]
    assert repo.graph.parents(first) == []


def test_log_without_commits(repo, out):
    repo.log()
    assert out.getvalue().endswith("No commits yet.\n")
    assert repo.storage.resolve_head() == ""
    assert repo.storage.read_reference("main") == ""


def test_log_lists_history_newest_first(repo, out):
    first = commit_file(repo, "a.txt", "one\n", "first")
    second = commit_file(repo, "a.txt", "two\n", "second")
    out.seek(0)
    out.truncate()
    repo.log()
    text = out.getvalue()
    assert text.startswith("On branch: main\n\n")
    assert text.index(f"Commit {second}") < text.index(f"Commit {first}")
    assert "   message: second" in text
    assert "   message: first" in text
    assert text.count("   timestamp: ") == 2


def test_branch_without_commit_raises(repo):
    with pytest.raises(MiniGitError, match="No commit to branch from"):
        repo.branch("feature")


def test_branch_points_at_head(repo, out):
    head = commit_file(repo, "a.txt", "one\n", "first")
    repo.branch("feature")
    assert repo.storage.read_reference("feature") == head
    assert f"Created branch 'feature' at {head[:7]}" in out.getvalue()


def test_checkout_branch_restores_and_removes_files(repo, out):
    commit_file(repo, "a.txt", "one\n", "first")
    repo.branch("feature")
    write(repo, "b.txt", "bee\n")
    repo.add("b.txt")
    write(repo, "a.txt", "changed\n")
    repo.add("a.txt")
    repo.commit("second")
    repo.checkout("feature")
    assert read(repo, "a.txt") == "one\n"
    assert not (repo.storage.root / "b.txt").exists()
    assert "Removed file: b.txt" in out.getvalue()
    assert repo.storage.read_file(HEAD_FILE) == "ref: refs/heads/feature"


def test_checkout_commit_detaches_head(repo, out):
    first = commit_file(repo, "a.txt", "one\n", "first")
    commit_file(repo, "a.txt", "two\n", "second")
    repo.checkout(first)
    assert repo.storage.read_file(HEAD_FILE) == first
    assert repo.storage.resolve_head() == first
    assert f"Checked out commit {first[:7]} (detached HEAD)" in out.getvalue()


def test_checkout_invalid_target_raises(repo):
    with pytest.raises(MiniGitError, match="Invalid branch or commit"):
        repo.checkout("missing")


def test_merge_unknown_branch_raises(repo):
    commit_file(repo, "a.txt", "one\n", "first")
    with pytest.raises(MiniGitError, match="Branch not found"):
        repo.merge("ghost")


def _fast_forward_setup(repo):
    first = commit_file(repo, "a.txt", "v1\n", "first")
    repo.branch("feature")
    repo.checkout("feature")
    second = commit_file(repo, "a.txt", "v2\n", "second")
    repo.checkout("main")
    return first, second


def test_merge_fast_forward(repo, out):
    first, second = _fast_forward_setup(repo)
    assert read(repo, "a.txt") == "v1\n"
    repo.merge("feature")
    text = out.getvalue()
    assert f"LCA: {first[:7]}" in text
    assert "Fast-forwarding to branch 'feature'." in text
    assert read(repo, "a.txt") == "v2\n"
    assert repo.storage.resolve_head() == second


def test_merge_already_merged(repo, out):
    _fast_forward_setup(repo)
    repo.checkout("feature")
    repo.merge("main")
    assert "Branch 'main' is already merged." in out.getvalue()
    assert read(repo, "a.txt") == "v2\n"


def _diverge(repo, feature_content):
    write(repo, "b.txt", "b1\n")
    repo.add("b.txt")
    commit_file(repo, "a.txt", "a1\n", "base")
    repo.branch("feature")
    commit_file(repo, "a.txt", "a2\n", "main change")
    repo.checkout("feature")
    name, content = feature_content
    commit_file(repo, name, content, "feature change")
    repo.checkout("main")


def test_merge_with_conflict(repo, out):
    _diverge(repo, ("a.txt", "a3\n"))
    repo.merge("feature")
    text = out.getvalue()
    assert "Merge completed with conflicts in the following files:" in text
    assert " - a.txt" in text
    assert read(repo, "a.txt") == "<<<<<<< HEAD\na2\n=======\na3\n>>>>>>>\n"
    assert read(repo, "b.txt") == "b1\n"


def test_diff_between_commits(repo, out):
    first = commit_file(repo, "a.txt", "same\nold\n", "first")
    second = commit_file(repo, "a.txt", "same\nnew\n", "second")
    out.seek(0)
    out.truncate()
    repo.diff(first, second)
    text = out.getvalue()
    assert "\nDiff for file: a.txt\n" in text
    assert f" Diff between {first}:a.txt and {second}:a.txt:" in text
    assert "\033[1;31m- 2    old\033[0m" in text
    assert "\033[1;32m+ 2    new\033[0m" in text
    assert "- 1    same" not in text


def test_diff_identical_commits_prints_nothing(repo, out):
    first = commit_file(repo, "a.txt", "same\n", "first")
    out.seek(0)
    out.truncate()
    repo.diff(first, first)
    assert out.getvalue() == ""
    assert repo.storage.resolve_head() == first
    assert repo.storage.read_file(INDEX_FILE) == ""


def test_diff_missing_commit_raises(repo):
    first = commit_file(repo, "a.txt", "one\n", "first")
    with pytest.raises(MiniGitError, match="not found or empty"):
        repo.diff(first, "deadbeef")