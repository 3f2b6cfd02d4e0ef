"""Skill store: discovery and progressive disclosure of vault skills."""

from typing import Optional

from ..observability.logging_config import get_logger
from ..vault.base import Vault, VaultFile, VaultFolder, normalize_path
from ..vault.frontmatter import frontmatter_end
from .skill_loader import (
    SKILL_MD_FILENAME,
    SkillMetadata,
    SkillNameValidation,
    SkillSummary,
    metadata_from_frontmatter,
    validate_skill_name,
)

logger = get_logger(__name__)


class SkillError(ValueError):
    """Raised when a skill cannot be created."""


class SkillManager:
    """
    Manages skills stored in the vault.

    Skills live under ``<history folder>/skills``::

        skills/
          skill-name/
            SKILL.md       # Required - frontmatter + instructions
            references/    # Optional - detailed reference docs
            assets/        # Optional - templates, data files
            scripts/       # Optional - read-only reference, never executed

    Implements progressive disclosure:
    - Level 1: name + description of every skill (get_skill_summaries)
    - Level 2: SKILL.md body for one skill (load_skill)
    - Level 3: a single resource file inside a skill (read_skill_resource)

    Nothing is cached between calls; every discovery re-reads the vault.
    """

    def __init__(self, vault: Vault, history_folder: Optional[str] = None):
        """
        Initialize SkillManager.

        Args:
            vault: Vault holding the skills folder
            history_folder: State folder (defaults to SCRIBE_HISTORY_FOLDER)
        """
        if history_folder is None:
            from ..config import Config

            history_folder = Config.get_history_folder()

        self.vault = vault
        self.history_folder = normalize_path(history_folder)

    def get_skills_folder_path(self) -> str:
        """Vault path of the skills root."""
        return normalize_path(f"{self.history_folder}/skills")

    async def ensure_skills_directory(self) -> None:
        """Create the state folder and skills root if missing."""
        await self.vault.ensure_folder(self.get_skills_folder_path())

    async def discover_skills(self) -> list[SkillMetadata]:
        """
        Scan the skills root for subfolders holding a valid SKILL.md.

        Invalid skills are skipped with a warning, never an error. Order
        follows the vault's folder listing.
        """
        folder = self.vault.get_by_path(self.get_skills_folder_path())
        if not isinstance(folder, VaultFolder):
            return []

        skills: list[SkillMetadata] = []
        for child in self.vault.list_folder(folder):
            if not isinstance(child, VaultFolder):
                continue

            manifest = self.vault.get_by_path(normalize_path(f"{child.path}/{SKILL_MD_FILENAME}"))
            if not isinstance(manifest, VaultFile):
                logger.warning(f"Skipping {child.path}: no {SKILL_MD_FILENAME}")
                continue

            try:
                metadata = self._parse_skill_metadata(manifest, child)
            except Exception as e:
                logger.warning(f"Failed to parse skill at {child.path}: {e}")
                continue

            if metadata:
                skills.append(metadata)

        logger.debug(f"Discovered {len(skills)} skills")
        return skills

    def _parse_skill_metadata(self, file: VaultFile, folder: VaultFolder) -> Optional[SkillMetadata]:
        frontmatter = self.vault.get_header(file)

        if not frontmatter or not frontmatter.get("name") or not frontmatter.get("description"):
            logger.warning(f"Skill at {file.path} missing required frontmatter (name, description)")
            return None

        # Directory name is canonical so load_skill() can always resolve it.
        if frontmatter["name"] != folder.name:
            logger.warning(
                f'Skill name "{frontmatter["name"]}" does not match directory name '
                f'"{folder.name}" at {file.path}. Using directory name.'
            )

        return metadata_from_frontmatter(frontmatter, folder.name, folder.path)

    async def get_skill_summaries(self) -> list[SkillSummary]:
        """Level 1 disclosure: name and description of every skill."""
        skills = await self.discover_skills()
        return [SkillSummary(name=skill.name, description=skill.description) for skill in skills]

    async def load_skill(self, name: str) -> Optional[str]:
        """
        Level 2 disclosure: the SKILL.md body with its frontmatter stripped.

        Returns:
            Instructions, or None if the name is invalid or the skill is missing
        """
        if not self.validate_skill_name(name).valid:
            return None

        path = normalize_path(f"{self.get_skills_folder_path()}/{name}/{SKILL_MD_FILENAME}")
        file = self.vault.get_by_path(path)
        if not isinstance(file, VaultFile):
            return None

        content = await self.vault.read(file)
        end = frontmatter_end(content)
        if end is not None:
            return content[end:].strip()
        return content

    async def read_skill_resource(self, skill_name: str, relative_path: str) -> Optional[str]:
        """
        Level 3 disclosure: raw content of a file inside a skill directory.

        Args:
            skill_name: Name of the skill
            relative_path: Path relative to the skill root
                (e.g. "references/REFERENCE.md")

        Returns:
            File content, or None if rejected or missing
        """
        if not self.validate_skill_name(skill_name).valid:
            return None

        if not isinstance(relative_path, str) or not relative_path:
            return None
        if ".." in relative_path or relative_path.startswith(("/", "\\")):
            return None

        skill_dir = normalize_path(f"{self.get_skills_folder_path()}/{skill_name}")
        resource_path = normalize_path(f"{skill_dir}/{relative_path}")

        # Second, independent check on the normalized result.
        if not resource_path.startswith(skill_dir + "/"):
            return None

        file = self.vault.get_by_path(resource_path)
        if not isinstance(file, VaultFile):
            return None

        return await self.vault.read(file)

    async def list_skill_resources(self, skill_name: str) -> list[str]:
        """List files in a skill directory, relative to it, excluding SKILL.md."""
        if not self.validate_skill_name(skill_name).valid:
            return []

        skill_dir = normalize_path(f"{self.get_skills_folder_path()}/{skill_name}")
        folder = self.vault.get_by_path(skill_dir)
        if not isinstance(folder, VaultFolder):
            return []

        resources: list[str] = []
        self._collect_files(folder, skill_dir, resources)
        return resources

    def _collect_files(self, folder: VaultFolder, base_path: str, results: list[str]) -> None:
        for child in self.vault.list_folder(folder):
            if isinstance(child, VaultFile):
                relative_path = child.path[len(base_path) + 1:]
                if relative_path != SKILL_MD_FILENAME:
                    results.append(relative_path)
            elif isinstance(child, VaultFolder):
                self._collect_files(child, base_path, results)

    async def create_skill(self, name: str, description: str, content: str) -> str:
        """
        Create a new skill directory with a SKILL.md manifest.

        The manifest is written with an empty header first and name and
        description are then set through the vault's header editor, so the
        header is always valid YAML whatever the description contains.

        Returns:
            Vault path of the new SKILL.md

        Raises:
            SkillError: If the name is invalid or the skill already exists
        """
        validation = self.validate_skill_name(name)
        if not validation.valid:
            raise SkillError(validation.error)

        await self.ensure_skills_directory()

        skill_dir = normalize_path(f"{self.get_skills_folder_path()}/{name}")
        if self.vault.get_by_path(skill_dir) is not None:
            raise SkillError(f'Skill "{name}" already exists')

        await self.vault.create_folder(skill_dir)

        skill_md_path = normalize_path(f"{skill_dir}/{SKILL_MD_FILENAME}")
        file = await self.vault.create(skill_md_path, f"---\n---\n\n{content}")

        def set_fields(frontmatter: dict) -> None:
            frontmatter["name"] = name
            frontmatter["description"] = description

        await self.vault.update_header(file, set_fields)

        logger.info(f"Skill created: {name} at {skill_md_path}")
        return skill_md_path

    def validate_skill_name(self, name: str) -> SkillNameValidation:
        """Check a name against the skill naming rules."""
        return validate_skill_name(name)

    async def get_system_prompt_section(self) -> str:
        """
        Generate the skills section for the system instruction.

        Only summaries are included; full instructions are loaded on demand
        through the activate_skill tool.
        """
        summaries = await self.get_skill_summaries()
        if not summaries:
            return ""

        section = "## Available Skills\n\n"
        section += "You have access to specialized skills for domain-specific tasks:\n\n"
        for summary in summaries:
            section += f"- **{summary.name}**: {summary.description}\n"
        section += (
            "\nWhen a request matches a skill's purpose, call activate_skill with its name "
            "to load the full instructions before answering.\n"
        )
        return section
