"""
Project registry shared by the card grid and the screenshot pipeline
"""

from dataclasses import dataclass
from typing import List

from pileshots.data.themes import Theme

ASSETS_URL_PREFIX = "/assets"


@dataclass(frozen=True)
class ProjectRecord:
    """A showcased project and where its screenshots are written"""

    id: int
    name: str
    url: str
    repo: str
    output_base_name: str
    description: str

    def output_filename(self, theme: Theme, image_format: str = "png") -> str:
        return f"{self.output_base_name}-{Theme.parse(theme).value}.{image_format}"

    def thumbnail_path(self, theme: Theme, image_format: str = "png") -> str:
        """Public URL path of the themed thumbnail served by the site"""
        return f"{ASSETS_URL_PREFIX}/{self.output_filename(theme, image_format)}"


PROJECTS: List[ProjectRecord] = [
    ProjectRecord(
        id=1,
        name="HyprL",
        url="https://hyprl.projectpile.tech",
        repo="https://github.com/Manpreet113/hyprL",
        output_base_name="hyprl",
        description=(
            "HyprL takes the power of Hyprland and makes it approachable for everyone "
            "by providing one-command installation and beginner friendly guides."
        ),
    ),
    ProjectRecord(
        id=2,
        name="Portfolio",
        url="https://manpreet.tech",
        repo="https://github.com/Manpreet113/portfolio-site",
        output_base_name="portfolio",
        description=(
            "A showcase of my work, featuring projects that demonstrate my skills and expertise."
        ),
    ),
    ProjectRecord(
        id=3,
        name="Project Pile",
        url="https://projectpile.tech",
        repo="https://github.com/Manpreet113/ProjectPile",
        output_base_name="projectpile",
        description=(
            "The root domain for Project Pile, a collection of my projects and "
            "experiments in web development and design."
        ),
    ),
    ProjectRecord(
        id=4,
        name="NoteHole",
        url="https://notehole.projectpile.tech",
        repo="https://github.com/Manpreet113/NoteHole",
        output_base_name="notehole",
        description=(
            "A secure encrypted note-taking app built from using React, Tailwind CSS, and Supabase."
        ),
    ),
]


def get_project(name: str) -> ProjectRecord:
    """Look up a project by its display name (case-insensitive)"""
    wanted = name.strip().lower()
    for project in PROJECTS:
        if project.name.lower() == wanted:
            return project
    raise KeyError(f"Unknown project: {name}")
