"""CLI command for listing transcode profiles."""

import click

from handbrake.config.profiles import (
    ProfileError,
    get_profiles_directory,
    list_profiles,
    load_profile,
)


@click.command("profiles")
def profiles_command() -> None:
    """List available transcode profiles.

    Profiles are stored in ~/.handbrake-py/profiles/ as YAML files and
    applied with 'transcode --profile NAME'.
    """
    profiles_dir = get_profiles_directory()
    profile_names = list_profiles(profiles_dir)

    if not profile_names:
        click.echo(f"No profiles found in {profiles_dir}")
        click.echo("\nTo create a profile, add a YAML file to the profiles directory.")
        click.echo("Example: ~/.handbrake-py/profiles/tablet.yaml")
        return

    click.echo(f"{'NAME':<15} {'OPTIONS':>7}  {'DESCRIPTION'}")
    click.echo("-" * 70)

    for name in profile_names:
        try:
            profile = load_profile(name, profiles_dir)
        except ProfileError as e:
            click.echo(f"{name:<15} {'-':>7}  (error: {e})")
            continue
        description = profile.description or "-"
        click.echo(f"{name:<15} {len(profile.options):>7}  {description[:44]}")
