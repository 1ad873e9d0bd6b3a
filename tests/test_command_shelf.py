"""Tests for the command shelf."""

from core.command_shelf import CommandShelf, CommandRecord, normalize_command_text


class RecordingPersistence:
    """Stands in for ShelfPersistence and keeps every scheduled snapshot."""

    def __init__(self):
        self.snapshots = []

    def schedule_save(self, snapshot):
        self.snapshots.append(snapshot)


def texts(records):
    return [record.text for record in records]


class TestAdd:
    def test_newest_first(self):
        shelf = CommandShelf()
        shelf.add("ls")
        shelf.add("pwd")
        assert texts(shelf.list()) == ["pwd", "ls"]

    def test_trims_and_ignores_blank(self):
        shelf = CommandShelf()
        assert shelf.add("   ") is None
        assert shelf.add("  ls -la  ").text == "ls -la"
        assert len(shelf) == 1

    def test_duplicate_moves_existing_record_to_front(self):
        shelf = CommandShelf()
        first = shelf.add("ls")
        shelf.add("pwd")
        again = shelf.add("ls")
        assert texts(shelf.list()) == ["ls", "pwd"]
        assert again.id == first.id
        assert again.created_at >= first.created_at

    def test_duplicate_keeps_pin(self):
        shelf = CommandShelf()
        record = shelf.add("ls")
        shelf.toggle_pin(record.id)
        shelf.add("ls")
        records = shelf.list()
        assert len(records) == 1
        assert records[0].pinned is True

    def test_each_mutation_schedules_save(self):
        persistence = RecordingPersistence()
        shelf = CommandShelf(persistence=persistence)
        record = shelf.add("ls")
        shelf.toggle_pin(record.id)
        shelf.delete(record.id)
        assert len(persistence.snapshots) == 3
        assert texts(persistence.snapshots[0].records) == ["ls"]
        assert persistence.snapshots[-1].records == []

    def test_reads_are_copies(self):
        shelf = CommandShelf()
        shelf.add("ls")
        shelf.list()[0].text = "rm -rf /"
        assert texts(shelf.list()) == ["ls"]


class TestCapacity:
    def test_oldest_evicted_first(self):
        shelf = CommandShelf()
        for i in range(5001):
            shelf.add(f"cmd {i}")
        records = shelf.list()
        assert len(records) == 5000
        assert records[0].text == "cmd 5000"
        assert records[-1].text == "cmd 1"

    def test_pinned_oldest_survives(self):
        shelf = CommandShelf()
        oldest = shelf.add("cmd 0")
        for i in range(1, 5000):
            shelf.add(f"cmd {i}")
        shelf.toggle_pin(oldest.id)
        shelf.add("cmd 5000")
        records = shelf.list()
        assert len(records) == 5000
        assert records[-1].text == "cmd 0"
        assert "cmd 1" not in texts(records)

    def test_new_unpinned_command_is_evicted_when_rest_is_pinned(self):
        shelf = CommandShelf(capacity=2)
        for text in ("a", "b"):
            shelf.toggle_pin(shelf.add(text).id)
        assert shelf.add("c") is None
        assert texts(shelf.list()) == ["b", "a"]

    def test_all_pinned_stays_over_capacity_until_unpin(self):
        source = CommandShelf()
        for text in ("a", "b", "c"):
            source.toggle_pin(source.add(text).id)

        shelf = CommandShelf(capacity=2)
        shelf.load_snapshot(source.snapshot())
        assert texts(shelf.list()) == ["c", "b", "a"]

        oldest = shelf.list()[-1]
        shelf.toggle_pin(oldest.id)
        assert texts(shelf.list()) == ["c", "b"]


class TestListAndSuggest:
    def test_query_ranks_by_score(self):
        shelf = CommandShelf()
        shelf.add("status")
        shelf.add("set top")
        shelf.add("ls")
        assert texts(shelf.list("st")) == ["status", "set top"]

    def test_ties_keep_recency_order(self):
        shelf = CommandShelf()
        shelf.add("make a")
        shelf.add("make b")
        assert texts(shelf.list("make")) == ["make b", "make a"]

    def test_suggest_uses_recency(self):
        shelf = CommandShelf()
        shelf.add("git commit")
        shelf.add("git status")
        shelf.add("ls")
        assert shelf.suggest("gi") == "git status"
        assert shelf.suggest("") is None


class TestEditAndDelete:
    def test_edit_normalizes_typographic_characters(self):
        shelf = CommandShelf()
        record = shelf.add("echo hi")
        assert shelf.edit(record.id, "  echo “hi” ‘there’ —force  ")
        assert shelf.get(record.id).text == "echo \"hi\" 'there' --force"

    def test_edit_rejects_blank_and_unknown(self):
        shelf = CommandShelf()
        record = shelf.add("ls")
        assert shelf.edit(record.id, "   ") is False
        assert shelf.edit("missing", "pwd") is False
        assert texts(shelf.list()) == ["ls"]

    def test_edit_into_existing_text_merges_records(self):
        shelf = CommandShelf()
        pinned = shelf.add("ls -l")
        shelf.toggle_pin(pinned.id)
        record = shelf.add("ls -la")
        shelf.edit(record.id, "ls -l")
        records = shelf.list()
        assert texts(records) == ["ls -l"]
        assert records[0].id == record.id
        assert records[0].pinned is True

    def test_group_member_edit_leaves_history_alone(self):
        shelf = CommandShelf()
        record = shelf.add("make build")
        group = shelf.create_group("build")
        member = shelf.add_to_group(record.id, group.id)
        shelf.edit(member.id, "make release", group_id=group.id)
        assert texts(shelf.list()) == ["make build"]
        assert texts(shelf.list_groups()[0].members) == ["make release"]

    def test_propagated_edit_updates_history_and_groups(self):
        shelf = CommandShelf()
        record = shelf.add("make build")
        group = shelf.create_group("build")
        shelf.add_to_group(record.id, group.id)
        shelf.edit(record.id, "make all", propagate=True)
        assert texts(shelf.list()) == ["make all"]
        assert texts(shelf.list_groups()[0].members) == ["make all"]

    def test_delete(self):
        shelf = CommandShelf()
        record = shelf.add("ls")
        assert shelf.delete(record.id) is True
        assert shelf.delete(record.id) is False
        assert len(shelf) == 0

    def test_toggle_pin_unknown_is_none(self):
        assert CommandShelf().toggle_pin("missing") is None


class TestGroups:
    def test_create_rename_delete(self):
        shelf = CommandShelf()
        assert shelf.create_group("  ") is None
        group = shelf.create_group(" deploy ")
        assert group.name == "deploy"
        assert shelf.rename_group(group.id, "ship") is True
        assert [g.name for g in shelf.list_groups()] == ["ship"]
        assert shelf.delete_group(group.id) is True
        assert shelf.list_groups() == []

    def test_add_to_group_copies_with_new_id(self):
        shelf = CommandShelf()
        record = shelf.add("kubectl get pods")
        group = shelf.create_group("k8s")
        member = shelf.add_to_group(record.id, group.id)
        assert member.id != record.id
        assert member.text == record.text
        assert shelf.add_to_group(record.id, group.id) is None

    def test_remove_from_group(self):
        shelf = CommandShelf()
        record = shelf.add("ls")
        group = shelf.create_group("misc")
        member = shelf.add_to_group(record.id, group.id)
        assert shelf.remove_from_group(member.id, group.id) is True
        assert shelf.list_groups()[0].members == []
        assert len(shelf) == 1

    def test_list_groups_query(self):
        shelf = CommandShelf()
        docker = shelf.create_group("docker")
        misc = shelf.create_group("misc")
        for text, group in (("docker ps", docker), ("docker images", docker),
                            ("git status", misc), ("ls", misc)):
            record = shelf.add(text)
            shelf.add_to_group(record.id, group.id)

        by_name = shelf.list_groups("dock")
        assert [g.name for g in by_name] == ["docker"]
        assert len(by_name[0].members) == 2

        by_member = shelf.list_groups("git")
        assert [g.name for g in by_member] == ["misc"]
        assert texts(by_member[0].members) == ["git status"]


class TestSnapshot:
    def test_load_snapshot_dedupes_and_does_not_save(self):
        persistence = RecordingPersistence()
        source = CommandShelf()
        source.add("ls")
        snapshot = source.snapshot()
        snapshot.records.append(CommandRecord(" ls "))

        shelf = CommandShelf(persistence=persistence)
        shelf.load_snapshot(snapshot)
        assert texts(shelf.list()) == ["ls"]
        assert persistence.snapshots == []

    def test_stats(self):
        shelf = CommandShelf()
        record = shelf.add("ls")
        shelf.add("pwd")
        shelf.toggle_pin(record.id)
        shelf.create_group("g")
        assert shelf.get_stats() == {'total_commands': 2, 'pinned_commands': 1, 'groups': 1}


def test_normalize_command_text():
    assert normalize_command_text(" “a” ") == '"a"'
