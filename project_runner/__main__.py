from project_runner.cli import main

main(prog_name="pr")
