from spktools.cli.runner import run

run()
