import asyncio
import csv
import io

from intelligent_recall.schemas import VocabularyEntry
from intelligent_recall.vocab_bank import VocabularyBank


def _entry(word):
    return VocabularyEntry(word=word, part_of_speech="Noun", definition=f"meaning of {word}", context=f"A {word}.", source="Manual")


def test_save_prepends_new_item_and_keeps_existing():
    bank = VocabularyBank()
    first = bank.save(_entry("alpha"))
    before = first.model_dump()

    second = bank.save(_entry("beta"))

    assert [item.word for item in bank.items] == ["beta", "alpha"]
    assert second.status == "new"
    assert bank.items[1].model_dump() == before
    assert first.id != second.id


def test_items_property_is_a_copy():
    bank = VocabularyBank()
    bank.save(_entry("alpha"))
    bank.items.clear()
    assert len(bank.items) == 1


def test_sync_moves_only_new_items_and_is_idempotent():
    bank = VocabularyBank()
    bank.save(_entry("alpha"))
    bank.save(_entry("beta"))

    assert asyncio.run(bank.sync()) == 2
    synced_snapshot = [item.model_dump() for item in bank.items]
    assert all(item.status == "synced" for item in bank.items)

    assert asyncio.run(bank.sync()) == 0
    assert [item.model_dump() for item in bank.items] == synced_snapshot


def test_sync_after_new_save_only_touches_the_new_word():
    bank = VocabularyBank()
    old = bank.save(_entry("alpha"))
    asyncio.run(bank.sync())
    bank.save(_entry("beta"))

    assert asyncio.run(bank.sync(0.01)) == 1
    assert [item.status for item in bank.items] == ["synced", "synced"]
    assert bank.items[1].id == old.id
    assert bank.items[1].added_at == old.added_at


def test_export_csv_lists_every_word():
    bank = VocabularyBank()
    bank.save(_entry("alpha"))
    bank.save(_entry("beta"))
    bank.mark_synced()
    bank.save(_entry("gamma"))

    rows = list(csv.DictReader(io.StringIO(bank.export_csv())))

    assert [row["word"] for row in rows] == ["gamma", "beta", "alpha"]
    assert [row["status"] for row in rows] == ["new", "synced", "synced"]
    assert rows[0]["context"] == "A gamma."
