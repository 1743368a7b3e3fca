from tasktrack.cli import main

main()
