"""CLI entry point for the storyboard generator."""

import asyncio
import logging
import typer
from pathlib import Path
from typing import Optional

from . import __version__
from .config import config
from .models import Language, Scenario

app = typer.Typer(
    name="storyboarder",
    help="AI-powered storyboard generator",
    no_args_is_help=True
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storyboarder version {__version__}")
        raise typer.Exit()


def load_scenario(path: Path) -> Scenario:
    try:
        return Scenario.from_yaml(path)
    except Exception as e:
        typer.echo(f"❌ Error loading scenario: {e}")
        raise typer.Exit(1)


def save_scenario(scenario: Scenario, path: Path) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        scenario.to_yaml(path)
        typer.echo(f"\n✅ Scenario saved: {path}")
    except Exception as e:
        typer.echo(f"❌ Error saving scenario: {e}")
        raise typer.Exit(1)


def preview(text: str, width: int = 70) -> str:
    return text[:width] + "..." if len(text) > width else text


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Storyboarder - Turn story pitches into storyboards using AI."""
    pass


@app.command()
def status(
    script: Path = typer.Option(
        Path("scenario.yaml"),
        "--scenario",
        "-s",
        help="Path to scenario YAML file",
        exists=False,
        file_okay=True,
        dir_okay=False
    )
) -> None:
    """Show scenario status."""
    if not script.exists():
        typer.echo(f"❌ No scenario found at {script}")
        typer.echo("   Run 'storyboarder scenario' to create one")
        raise typer.Exit(1)

    scenario = load_scenario(script)
    typer.echo(f"📁 Scenario: {preview(scenario.scenario)}")
    typer.echo(f"   Language: {scenario.language.name} ({scenario.language.code})")
    typer.echo(f"   Genre: {scenario.genre}  Mood: {scenario.mood}")

    typer.echo("\n🎭 Characters:")
    for character in scenario.characters:
        status_icon = "✅" if character.image_gcs_uri else "⏳"
        typer.echo(f"   {status_icon} {character.name}")

    typer.echo("\n📽️  Scenes:")
    for i, scene in enumerate(scenario.scenes, start=1):
        image_icon = "🖼️ " if scene.image_gcs_uri else "⏳"
        video_icon = "🎞️ " if scene.video_url else "⏳"
        typer.echo(f"   {image_icon}{video_icon} scene {i}: {preview(scene.description, 60)}")


@app.command()
def scenario(
    pitch: str = typer.Argument(
        ...,
        help="Story pitch for the video"
    ),
    scenes: int = typer.Option(
        4,
        "--scenes",
        "-n",
        help="Number of scenes",
        min=1,
        max=20
    ),
    style: str = typer.Option(
        "photographic",
        "--style",
        help="Visual style (e.g., 'cinematic', 'watercolor', '2D animation')"
    ),
    language: str = typer.Option(
        "English",
        "--language",
        "-l",
        help="Language of the scenario text"
    ),
    language_code: str = typer.Option(
        "en-US",
        "--language-code",
        help="Language code"
    ),
    output: Path = typer.Option(
        Path("scenario.yaml"),
        "--output",
        "-o",
        help="Output scenario file path"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a scenario with character images from a story pitch."""
    from .agents import ScenarioAgent, ScenarioInput

    setup_logging(verbose)
    typer.echo(f"🎬 Pitch: {pitch}")
    typer.echo(f"   Scenes: {scenes}  Style: {style}  Language: {language}")

    try:
        config.validate_required()
        config.validate_google_required()
        agent = ScenarioAgent()
        typer.echo(f"   Using model: {agent.model}")
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    try:
        result = asyncio.run(agent.run(ScenarioInput(
            pitch=pitch,
            num_scenes=scenes,
            style=style,
            language=Language(name=language, code=language_code),
        )))
    except Exception as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)

    save_scenario(result, output)

    typer.echo(f"\n📋 Summary:")
    typer.echo(f"   Characters: {len(result.characters)}")
    for character in result.characters:
        image = character.image_gcs_uri or "no image"
        typer.echo(f"   • {character.name}: {image}")
    typer.echo(f"   Settings: {len(result.settings)}")
    typer.echo(f"   Scenes: {len(result.scenes)}")


@app.command()
def storyboard(
    script: Path = typer.Option(
        Path("scenario.yaml"),
        "--scenario",
        "-s",
        help="Path to scenario YAML file",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    scenes: int = typer.Option(
        4,
        "--scenes",
        "-n",
        help="Number of scenes",
        min=1,
        max=20
    ),
    style: str = typer.Option(
        "photographic",
        "--style",
        help="Visual style"
    ),
    character_references: Optional[bool] = typer.Option(
        None,
        "--character-references/--no-character-references",
        help="Use character images as subject references for scene images"
    ),
    output: Path = typer.Option(
        Path("storyboard.yaml"),
        "--output",
        "-o",
        help="Output scenario file path"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate illustrated scenes for an existing scenario."""
    from .agents import StoryboardAgent, StoryboardInput

    setup_logging(verbose)
    source = load_scenario(script)
    typer.echo(f"🖼️  Storyboarding: {preview(source.scenario)}")

    try:
        config.validate_required()
        config.validate_google_required()
        agent = StoryboardAgent(use_character_references=character_references)
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    try:
        result = asyncio.run(agent.run(StoryboardInput(
            scenario=source,
            num_scenes=scenes,
            style=style,
            language=source.language,
        )))
    except Exception as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)

    save_scenario(result, output)

    missing = sum(1 for scene in result.scenes if not scene.image_gcs_uri)
    typer.echo(f"\n📋 Summary:")
    typer.echo(f"   Scenes: {len(result.scenes)}")
    typer.echo(f"   Without image: {missing}")


@app.command()
def videos(
    script: Path = typer.Option(
        Path("storyboard.yaml"),
        "--scenario",
        "-s",
        help="Path to storyboard YAML file",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    public_dir: Optional[Path] = typer.Option(
        None,
        "--public-dir",
        "-p",
        help="Directory the videos are mirrored to"
    ),
    parallel: Optional[int] = typer.Option(
        None,
        "--parallel",
        help="Maximum concurrent generations",
        min=1,
        max=10
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Generate a video for every scene that has a storyboard image.

    The scenario file is updated with each scene's file name and signed URL.
    """
    from .models import VideoScene
    from .services.storage import StorageClient
    from .videos import VideoAssembler

    setup_logging(verbose)
    source = load_scenario(script)
    typer.echo(f"🎬 Video generation: {script}")

    try:
        config.validate_google_required()
        storage = StorageClient()
        assembler = VideoAssembler(storage=storage, public_dir=public_dir, max_concurrency=parallel)
    except Exception as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    # Scenes keep their index so results can be written back
    indexed: list[tuple[int, VideoScene]] = []
    for i, scene in enumerate(source.scenes):
        if not scene.image_gcs_uri:
            typer.echo(f"   - scene {i + 1}: skipped (no image)")
            continue
        try:
            image_base64 = storage.read_base64(scene.image_gcs_uri)
        except Exception as e:
            typer.echo(f"❌ Could not fetch image for scene {i + 1}: {e}")
            raise typer.Exit(1)
        indexed.append((i, VideoScene(
            image_prompt=scene.image_prompt,
            video_prompt=scene.video_prompt,
            description=scene.description,
            voiceover=scene.voiceover,
            image_base64=image_base64,
        )))

    if not indexed:
        typer.echo("\n✅ No scenes to generate")
        raise typer.Exit(0)

    typer.echo(f"\n⏳ Generating {len(indexed)} video(s)...\n")
    try:
        video_urls = asyncio.run(assembler.generate_videos([scene for _, scene in indexed]))
    except Exception as e:
        typer.echo(f"❌ Video generation failed: {e}")
        raise typer.Exit(1)

    for (i, _), video in zip(indexed, video_urls):
        source.scenes[i].file_name = video.file_name
        source.scenes[i].video_url = video.url
        typer.echo(f"   ✅ scene {i + 1}: {assembler.public_dir / video.file_name}")

    save_scenario(source, script)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", help="Bind port"),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Serve the HTTP API."""
    import uvicorn

    setup_logging(verbose)
    uvicorn.run("storyboarder.api:app", host=host, port=port)


if __name__ == "__main__":
    app()
