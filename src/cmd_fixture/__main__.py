from cmd_fixture.cli import main

main()
