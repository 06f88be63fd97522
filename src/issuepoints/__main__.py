from issuepoints.cli import main

main()
