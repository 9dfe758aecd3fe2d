from byteviz.server import main

main()
