# -*- coding: utf-8 -*-
"""
评分入口测试

从 YAML + CSV 运行 eval.main，检查返回码与输出文件
"""

import csv
import tempfile
from pathlib import Path

import pytest
import yaml

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

import eval as eval_entry


def write_csv(path: Path, header, rows):
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(header)
        writer.writerows(rows)


def write_config(tmpdir: Path, solution: Path, submission: Path, **evaluation) -> Path:
    config = {
        'experiment': {'name': 'cli'},
        'data': {
            'solution_path': str(solution),
            'submission_path': str(submission),
        },
        'evaluation': {'num_workers': 0, 'show_progress': False, **evaluation},
        'output': {'results_dir': str(tmpdir / "results"), 'save_per_row': True},
    }
    path = tmpdir / "config.yaml"
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(config, f)
    return path


@pytest.mark.unit
class TestEvalEntry:
    """测试 eval.main"""

    def test_scores_submission(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)
            solution = tmpdir / "solution.csv"
            submission = tmpdir / "submission.csv"
            write_csv(solution, ['row_id', 'annotation', 'shape'], [
                ['a', 'authentic', '[2, 2]'],
                ['b', '[1, 2]', '[2, 2]'],
            ])
            write_csv(submission, ['row_id', 'annotation'], [
                ['a', 'authentic'],
                ['b', '[1, 2];[3, 2]'],
            ])
            config_path = write_config(tmpdir, solution, submission)

            exit_code = eval_entry.main(["--config", str(config_path)])

            assert exit_code == 0
            assert capsys.readouterr().out.strip().endswith("0.750000")
            assert (tmpdir / "results" / "cli" / "metrics.csv").exists()
            assert (tmpdir / "results" / "cli" / "per_row_scores.csv").exists()

    def test_cli_overrides_submission(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)
            solution = tmpdir / "solution.csv"
            submission = tmpdir / "submission.csv"
            perfect = tmpdir / "perfect.csv"
            write_csv(solution, ['row_id', 'annotation', 'shape'], [['b', '[1, 2]', '[2, 2]']])
            write_csv(submission, ['row_id', 'annotation'], [['b', '']])
            write_csv(perfect, ['row_id', 'annotation'], [['b', '[1, 2]']])
            config_path = write_config(tmpdir, solution, submission)

            exit_code = eval_entry.main(["--config", str(config_path), "--submission", str(perfect)])

            assert exit_code == 0
            assert capsys.readouterr().out.strip().endswith("1.000000")

    def test_malformed_submission_fails(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)
            solution = tmpdir / "solution.csv"
            submission = tmpdir / "submission.csv"
            write_csv(solution, ['row_id', 'annotation', 'shape'], [['b', '[1, 2]', '[2, 2]']])
            write_csv(submission, ['row_id', 'annotation'], [['b', '[3, 1, 1, 1]']])
            config_path = write_config(tmpdir, solution, submission)

            assert eval_entry.main(["--config", str(config_path)]) == 1
            assert not (tmpdir / "results" / "cli" / "metrics.csv").exists()

    def test_missing_config_fails(self):
        assert eval_entry.main(["--config", "/nonexistent/config.yaml"]) == 1

    def test_invalid_override_fails(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tmpdir = Path(tmpdir)
            solution = tmpdir / "solution.csv"
            write_csv(solution, ['row_id', 'annotation', 'shape'], [['b', 'authentic', '[2, 2]']])
            config_path = write_config(tmpdir, solution, solution)

            assert eval_entry.main(["--config", str(config_path), "--num-workers", "-2"]) == 1


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
