from .step_10_preflight import PreflightStep
from .step_20_core_packages import CorePackagesStep
from .step_30_default_shell import DefaultShellStep
from .step_40_font import FontStep
from .step_50_shell_framework import ShellFrameworkStep
from .step_60_plugins import PluginsStep
from .step_70_prompt_tool import PromptToolStep
from .step_80_history_tool import HistoryToolStep
from .step_85_init_snippets import InitSnippetsStep
from .step_90_deploy_configs import DeployConfigsStep

__all__ = [
    "PreflightStep",
    "CorePackagesStep",
    "DefaultShellStep",
    "FontStep",
    "ShellFrameworkStep",
    "PluginsStep",
    "PromptToolStep",
    "HistoryToolStep",
    "InitSnippetsStep",
    "DeployConfigsStep",
]
