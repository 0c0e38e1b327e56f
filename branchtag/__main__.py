from branchtag.cli.app import main

main()
