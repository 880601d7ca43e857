from docvault.cli import main

main()
