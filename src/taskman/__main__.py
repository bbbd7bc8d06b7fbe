from taskman.cli.main import main

main()
