from promcommon.version import BuildInfo


def sample():
    return BuildInfo(
        version="1.2.3",
        revision="abc123",
        branch="main",
        build_user="builder",
        build_date="20240101",
        runtime_version="3.11.0",
        os="linux",
        arch="x86_64",
    )


def test_effective_revision_prefers_set_revision():
    info = BuildInfo(revision="abc123", vcs={"vcs.revision": "def456"})
    assert info.effective_revision() == "abc123"


def test_effective_revision_unknown_without_settings():
    assert BuildInfo().effective_revision() == "unknown"


def test_effective_revision_from_vcs_modified():
    info = BuildInfo(vcs={"vcs.revision": "def456", "vcs.modified": "true"})
    assert info.effective_revision() == "def456-modified"


def test_effective_revision_from_vcs_clean():
    info = BuildInfo(vcs={"vcs.revision": "def456", "vcs.modified": "false"})
    assert info.effective_revision() == "def456"


def test_info():
    assert sample().info() == "(version=1.2.3, branch=main, revision=abc123)"


def test_build_context_mentions_fields():
    text = sample().build_context()
    assert text.startswith("(")
    assert "platform=linux/x86_64" in text
    assert "user=builder" in text
    assert "date=20240101" in text


def test_print_layout():
    lines = sample().print("app").splitlines()
    assert lines[0] == "app, version 1.2.3 (branch: main, revision: abc123)"
    assert len(lines) == 5
    assert lines[1].split() == ["build", "user:", "builder"]
    assert lines[4].split() == ["platform:", "linux/x86_64"]
    assert all(line.startswith("  ") for line in lines[1:])


def test_print_is_stripped():
    text = BuildInfo().print("app")
    assert text == text.strip()
    assert "revision: unknown" in text


def test_current_has_no_build_fields():
    info = BuildInfo.current()
    assert info.version == ""
    assert info.effective_revision() == "unknown"
    assert info.platform == f"{info.os}/{info.arch}"