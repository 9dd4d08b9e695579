from scraping_viewer.collection import ChangeKind, ObservableCollection, Signal


def test_signal_emits_to_connected_handlers_until_disconnected():
    signal = Signal()
    received = []
    disconnect = signal.connect(received.append)
    signal.emit(True)
    disconnect()
    disconnect()
    signal.emit(False)
    assert received == [True]
    assert len(signal) == 0


def test_collection_reports_adds_with_increasing_indices():
    collection = ObservableCollection()
    changes = []
    collection.subscribe(changes.append)

    assert collection.append("a") == 0
    assert collection.append("b") == 1

    assert [(c.kind, c.index, c.item) for c in changes] == [
        (ChangeKind.ADD, 0, "a"),
        (ChangeKind.ADD, 1, "b"),
    ]
    assert list(collection) == ["a", "b"]
    assert collection[1] == "b"
    assert len(collection) == 2


def test_collection_reset_clears_and_restarts_indices():
    collection = ObservableCollection()
    changes = []
    collection.subscribe(changes.append)
    collection.append("a")
    collection.reset()
    collection.append("b")

    assert [c.kind for c in changes] == [ChangeKind.ADD, ChangeKind.RESET, ChangeKind.ADD]
    assert changes[1].index is None and changes[1].item is None
    assert changes[2].index == 0
    assert list(collection) == ["b"]
