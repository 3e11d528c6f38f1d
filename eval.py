#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
统一评分入口

支持:
- --config: 配置文件路径
- --solution / --submission: 覆盖配置中的 CSV 路径
- --num-workers: 覆盖评分进程数

Usage:
    python eval.py --config configs/default.yaml
    python eval.py --config configs/default.yaml --submission results/sub.csv --num-workers 4
"""

import argparse
import logging
import os
import sys
from pathlib import Path

# 添加项目根目录到路径
sys.path.insert(0, str(Path(__file__).parent))

from maskscore.config_schema import load_and_validate_config, validate_config
from maskscore.data.dataset import load_score_rows
from maskscore.evaluation.evaluator import create_evaluator
from maskscore.exceptions import ParticipantVisibleError


def setup_logging(log_dir: str):
    """设置日志"""
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, "eval.log")

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[
            logging.FileHandler(log_file, encoding="utf-8"),
            logging.StreamHandler(),
        ],
    )
    return logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Score instance mask submissions")
    parser.add_argument("--config", "-c", type=str, required=True, help="Config file path")
    parser.add_argument("--solution", type=str, default=None, help="Solution CSV path")
    parser.add_argument("--submission", type=str, default=None, help="Submission CSV path")
    parser.add_argument("--num-workers", type=int, default=None, help="Number of scoring processes")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)

    config, errors = load_and_validate_config(args.config)
    if config is None:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 1

    # CLI 参数优先于配置文件
    if args.solution is not None:
        config.data.solution_path = args.solution
    if args.submission is not None:
        config.data.submission_path = args.submission
    if args.num_workers is not None:
        config.evaluation.num_workers = args.num_workers

    errors = validate_config(config)
    if errors:
        for error in errors:
            print(f"Config error: {error}", file=sys.stderr)
        return 1

    output_dir = Path(config.output.results_dir) / config.name
    logger = setup_logging(str(output_dir))
    logger.info(f"Scoring: {config.name}")

    for name in ('solution_path', 'submission_path'):
        if getattr(config.data, name) is None:
            logger.error(f"{name} is not set")
            return 1

    try:
        solution = load_score_rows(
            config.data.solution_path,
            id_column=config.data.id_column,
            annotation_column=config.data.annotation_column,
            shape_column=config.data.shape_column,
        )
        submission = load_score_rows(
            config.data.submission_path,
            id_column=config.data.id_column,
            annotation_column=config.data.annotation_column,
            shape_column=config.data.shape_column,
        )

        evaluator = create_evaluator(config, output_dir=str(output_dir))
        metrics = evaluator.evaluate(solution, submission)
    except ParticipantVisibleError as e:
        logger.error(f"Scoring failed: {e}")
        return 1

    logger.info("=" * 50)
    logger.info(f"Score: {metrics['score']:.6f}")
    logger.info("=" * 50)
    print(f"{metrics['score']:.6f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
