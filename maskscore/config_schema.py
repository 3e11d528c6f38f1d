# -*- coding: utf-8 -*-
"""
配置数据类定义

定义评分配置的数据结构，支持 YAML 加载与验证
"""

from dataclasses import dataclass, field
from typing import Optional, List, Tuple
import yaml
from pathlib import Path


# 必需字段定义
REQUIRED_FIELDS = {
    'experiment': ['name'],
    'data': ['solution_path', 'submission_path'],
    'evaluation': ['num_workers'],
    'output': ['results_dir'],
}


@dataclass
class DataConfig:
    """数据配置"""
    solution_path: Optional[str] = None
    submission_path: Optional[str] = None
    id_column: str = "row_id"
    annotation_column: str = "annotation"
    shape_column: str = "shape"


@dataclass
class EvaluationConfig:
    """评分配置"""
    num_workers: int = 0  # 0 / 1 为单进程
    max_masks_per_image: Optional[int] = None  # 匈牙利算法为 O(n^3)，可限制每张图的 mask 数
    show_progress: bool = True


@dataclass
class OutputConfig:
    """输出配置"""
    results_dir: str = "results"
    save_per_row: bool = True


@dataclass
class ScoringConfig:
    """评分任务配置"""
    name: str = "scoring"
    data: DataConfig = field(default_factory=DataConfig)
    evaluation: EvaluationConfig = field(default_factory=EvaluationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    def __post_init__(self):
        if isinstance(self.data, dict):
            self.data = DataConfig(**self.data)
        if isinstance(self.evaluation, dict):
            self.evaluation = EvaluationConfig(**self.evaluation)
        if isinstance(self.output, dict):
            self.output = OutputConfig(**self.output)


def load_config(config_path: str) -> ScoringConfig:
    """
    从 YAML 文件加载配置

    Args:
        config_path: 配置文件路径

    Returns:
        ScoringConfig 实例
    """
    with open(config_path, 'r', encoding='utf-8') as f:
        config_dict = yaml.safe_load(f) or {}

    # 处理嵌套的 experiment 字段
    if 'experiment' in config_dict:
        exp_dict = config_dict.pop('experiment') or {}
        config_dict.update(exp_dict)

    return ScoringConfig(**config_dict)


def save_config(config: ScoringConfig, save_path: str):
    """
    保存配置到 YAML 文件

    experiment 级字段写回 experiment 节，保证 load_config 能读回同样的配置。
    """
    def dataclass_to_dict(obj):
        if hasattr(obj, '__dataclass_fields__'):
            return {k: dataclass_to_dict(v) for k, v in obj.__dict__.items()}
        elif isinstance(obj, (list, tuple)):
            return [dataclass_to_dict(item) for item in obj]
        else:
            return obj

    config_dict = dataclass_to_dict(config)
    config_dict = {'experiment': {'name': config_dict.pop('name')}, **config_dict}

    Path(save_path).parent.mkdir(parents=True, exist_ok=True)
    with open(save_path, 'w', encoding='utf-8') as f:
        yaml.dump(config_dict, f, default_flow_style=False, allow_unicode=True, sort_keys=False)


def validate_config(config: ScoringConfig) -> List[str]:
    """
    验证配置有效性

    Returns:
        错误信息列表（空列表表示验证通过）
    """
    errors = []

    if not config.name or not str(config.name).strip():
        errors.append("name must be a non-empty string")

    if config.evaluation.num_workers < 0:
        errors.append(f"num_workers must be non-negative, got: {config.evaluation.num_workers}")

    max_masks = config.evaluation.max_masks_per_image
    if max_masks is not None and max_masks <= 0:
        errors.append(f"max_masks_per_image must be positive, got: {max_masks}")

    for name in ('id_column', 'annotation_column', 'shape_column'):
        if not getattr(config.data, name):
            errors.append(f"{name} must be a non-empty string")

    for name in ('solution_path', 'submission_path'):
        path = getattr(config.data, name)
        if path is not None and not Path(path).exists():
            errors.append(f"{name} not found: {path}")

    return errors


def validate_yaml_file(yaml_path: str) -> Tuple[bool, List[str]]:
    """
    验证 YAML 配置文件的格式和必需字段

    Returns:
        (是否有效, 错误信息列表)
    """
    errors = []

    if not Path(yaml_path).exists():
        return False, [f"Config file not found: {yaml_path}"]

    try:
        with open(yaml_path, 'r', encoding='utf-8') as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        return False, [f"YAML parsing error: {str(e)}"]

    if config_dict is None:
        return False, ["Config file is empty"]

    if not isinstance(config_dict, dict):
        return False, ["Config file must contain a dictionary at root level"]

    for section, fields in REQUIRED_FIELDS.items():
        if section not in config_dict:
            errors.append(f"Missing required top-level field: {section}")
        elif isinstance(config_dict[section], dict):
            for name in fields:
                if name not in config_dict[section]:
                    errors.append(f"Missing required field in {section}: {name}")

    return len(errors) == 0, errors


def load_and_validate_config(config_path: str) -> Tuple[Optional[ScoringConfig], List[str]]:
    """
    加载并验证配置文件

    Returns:
        (配置实例或None, 错误信息列表)
    """
    is_valid, yaml_errors = validate_yaml_file(config_path)
    if not is_valid:
        return None, yaml_errors

    try:
        config = load_config(config_path)
    except TypeError as e:
        return None, [f"Failed to load config: {str(e)}"]

    return config, validate_config(config)
