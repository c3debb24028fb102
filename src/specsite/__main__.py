from specsite._cli import main

main()
