"""
Prompt loading utility for the entity extraction prompts.
"""

import os
import logging

logger = logging.getLogger(__name__)

PROMPTS_DIR = os.path.join(os.path.dirname(__file__), '..', '..', '..', 'prompts')


def load_system_prompt(filename: str) -> str:
    """Load system prompt from markdown file in prompts directory"""
    prompts_path = os.path.join(PROMPTS_DIR, filename)
    try:
        with open(prompts_path, 'r') as f:
            content = f.read().strip()
            if not content:
                logger.critical(f"CRITICAL FAILURE: Prompt file {filename} is empty")
                raise RuntimeError(f"CRITICAL FAILURE: Required prompt file {filename} is empty")
            logger.info(f"Successfully loaded prompt: {filename}")
            return content
    except FileNotFoundError:
        logger.critical(f"CRITICAL FAILURE: Prompt file {filename} not found in prompts/ directory")
        raise RuntimeError(f"CRITICAL FAILURE: Required prompt file {filename} not found in prompts/ directory")


def load_extraction_prompt(actor_name: str, actor_role: str, junior_name: str = None, junior_email: str = None) -> str:
    """
    Load the case extraction prompt and fill in the recording lawyer's context.

    Args:
        actor_name: Display name of the lawyer
        actor_role: SENIOR or JUNIOR
        junior_name: Delegated junior, if any
        junior_email: Delegated junior's address, if any

    Returns:
        Formatted system prompt
    """
    template = load_system_prompt('case_extraction_system_prompt.md')
    junior_status = f"Yes ({junior_name})" if junior_email else "No"
    if actor_role == "SENIOR":
        junior_assignment_rule = "- You may assign cases to juniors if the lawyer mentions delegating"
    else:
        junior_assignment_rule = "- The lawyer is a JUNIOR: always set assign_to_junior=false"
    return template.format(
        actor_name=actor_name,
        actor_role=actor_role,
        junior_status=junior_status,
        junior_assignment_rule=junior_assignment_rule
    )
