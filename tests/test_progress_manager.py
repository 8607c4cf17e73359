import io

from rich.console import Console

from model_vault.cli.progress_manager import PROGRESS_RESOLUTION, ProgressManager


def _console():
    return Console(file=io.StringIO(), force_terminal=False)


def test_update_scales_fraction_to_bar():
    with ProgressManager(_console(), description="tiny") as progress:
        progress.update(0.5)
        task = progress.progress.tasks[0]

        assert task.description == "tiny"
        assert task.completed == PROGRESS_RESOLUTION // 2


def test_completion_fills_bar():
    with ProgressManager(_console()) as progress:
        progress.update(0.25)
        progress.update(1.0)

        assert progress.progress.tasks[0].finished


def test_update_before_start_is_ignored():
    progress = ProgressManager(_console())

    progress.update(0.5)

    assert progress.progress.tasks == []
