"""AI Agents for Deploy Wizard."""

from deploy_wizard.agents.base import BaseAgent
from deploy_wizard.agents.deployment_agent import (
    DeploymentScriptAgent,
    build_execution_command,
    build_prompt,
    parse_generated_script,
)

__all__ = [
    "BaseAgent",
    "DeploymentScriptAgent",
    "build_execution_command",
    "build_prompt",
    "parse_generated_script",
]
